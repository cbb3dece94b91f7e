"""
Database models for the student clinic backend.

These models capture the clinic's concepts: users identified by roll
number, visit records with the medicines dispensed at each visit, the
medicine inventory, issued medical certificates and an audit trail.
Visit records and dispensed lines are append-only; the inventory is
only ever changed by the conditional decrement in
:func:`medical.services.records.submit_record`.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Manager for :class:`User`, which logs in with a roll number."""

    use_in_migrations = True

    def _create_user(self, roll_no, password, **extra_fields):
        if not roll_no:
            raise ValueError("The roll number must be set")
        user = self.model(roll_no=roll_no, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, roll_no, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(roll_no, password, **extra_fields)

    def create_superuser(self, roll_no, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ROLE_STAFF)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(roll_no, password, **extra_fields)


class User(AbstractUser):
    """Clinic user identified by roll number.

    Students and medical staff share this table; ``role`` decides what
    they may do. Only students carry hostel/room details, and only the
    student may change them.
    """
    ROLE_STUDENT = 'student'
    ROLE_STAFF = 'medical-staff'
    ROLE_CHOICES = [
        (ROLE_STUDENT, 'Student'),
        (ROLE_STAFF, 'Medical staff'),
    ]

    username = None
    roll_no = models.CharField(max_length=32, unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STUDENT, db_index=True)
    name = models.CharField(max_length=255, blank=True)
    hostel_no = models.CharField(max_length=50, null=True, blank=True)
    room_no = models.CharField(max_length=50, null=True, blank=True)

    USERNAME_FIELD = 'roll_no'
    REQUIRED_FIELDS: list[str] = []

    objects = UserManager()

    @property
    def is_medical_staff(self) -> bool:
        return self.role == self.ROLE_STAFF

    @property
    def is_student(self) -> bool:
        return self.role == self.ROLE_STUDENT

    def __str__(self) -> str:
        return f"{self.roll_no} ({self.role})"


class InventoryItem(models.Model):
    """Stock count for one medicine. Stock never goes below zero."""
    medicine = models.CharField(max_length=255, unique=True)
    stock = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['medicine']

    def __str__(self) -> str:
        return f"{self.medicine}: {self.stock}"


class VisitRecord(models.Model):
    """One visit of a student to the clinic."""
    student = models.ForeignKey(
        User,
        to_field='roll_no',
        db_column='roll_no',
        on_delete=models.PROTECT,
        related_name='visit_records',
    )
    diagnosis = models.TextField()
    remarks = models.TextField(null=True, blank=True)
    # day-log filters on the date part
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=['student', 'created_at'], name='visit_student_created_idx'),
        ]

    def __str__(self) -> str:
        return f"Visit #{self.pk} of {self.student_id}"


class DispensedLine(models.Model):
    """A medicine handed out during a visit."""
    visit = models.ForeignKey(VisitRecord, on_delete=models.CASCADE, related_name='dispensed_lines')
    medicine_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField()

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.medicine_name} (Qty: {self.quantity})"


class Certificate(models.Model):
    """A medical certificate PDF issued for a visit.

    The serial number is the primary key, so a second certificate with
    the same serial fails with an integrity error on insert.
    """
    serial_no = models.CharField(max_length=64, primary_key=True)
    visit = models.ForeignKey(VisitRecord, on_delete=models.PROTECT, related_name='certificates')
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=16)
    relaxations = models.TextField(null=True, blank=True)
    file = models.FileField(max_length=512, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def filename(self) -> str:
        return self.file.name.rsplit('/', 1)[-1] if self.file else ''

    def __str__(self) -> str:
        return f"Certificate {self.serial_no} for visit #{self.visit_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
