from typing import Optional

from django.db import DEFAULT_DB_ALIAS
from rest_framework.exceptions import NotFound

from medical.models import User


def get_student(roll_no: str, *, using: str = DEFAULT_DB_ALIAS) -> User:
    student = User.objects.using(using).filter(roll_no=roll_no, role=User.ROLE_STUDENT).first()
    if not student:
        raise NotFound('Student not found')
    return student


def update_hostel_details(user: User, *, hostel_no: Optional[str], room_no: Optional[str],
                          using: str = DEFAULT_DB_ALIAS) -> int:
    """Overwrite both fields on the student's own row; returns rows updated."""
    return (
        User.objects.using(using)
        .filter(roll_no=user.roll_no, role=User.ROLE_STUDENT)
        .update(hostel_no=hostel_no, room_no=room_no)
    )
