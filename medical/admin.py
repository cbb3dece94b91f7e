"""
Django admin registrations for the clinic models.

Superusers can inspect users, inventory, visit records and certificates
at ``/admin/``. Visit records and dispensed lines are append-only in the
API, so their admin pages are read-only.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
    Certificate,
    DispensedLine,
    InventoryItem,
    User,
    VisitRecord,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('roll_no', 'name', 'role', 'hostel_no', 'room_no', 'is_active')
    list_filter = ('role', 'is_active')
    search_fields = ('roll_no', 'name')


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('medicine', 'stock')
    search_fields = ('medicine',)


class DispensedLineInline(admin.TabularInline):
    model = DispensedLine
    extra = 0
    can_delete = False
    readonly_fields = ('medicine_name', 'quantity')


@admin.register(VisitRecord)
class VisitRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'diagnosis', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('student__roll_no', 'student__name', 'diagnosis')
    readonly_fields = ('student', 'diagnosis', 'remarks', 'created_at')
    inlines = [DispensedLineInline]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ('serial_no', 'visit', 'age', 'gender', 'created_at')
    search_fields = ('serial_no', 'visit__student__roll_no')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
