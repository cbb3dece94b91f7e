"""
Visit record submission.

A submission writes the visit record, one dispensed line per prescribed
medicine, and decrements the inventory, all inside a single transaction.
Each decrement is one conditional ``UPDATE ... SET stock = stock - qty
WHERE medicine = name AND stock >= qty``; when it matches no row the
medicine is unknown or short and the whole transaction is rolled back.
Repeated medicines are decremented line by line, not merged.
"""
import logging
from typing import Iterable, Mapping, Optional

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import F
from rest_framework.exceptions import NotFound

from medical.exceptions import InsufficientStock
from medical.models import DispensedLine, InventoryItem, User, VisitRecord
from medical.services.audit import log_action

logger = logging.getLogger(__name__)


def decrement_stock(medicine: str, qty: int, *, using: str = DEFAULT_DB_ALIAS) -> bool:
    """Take ``qty`` units of ``medicine`` if that many are in stock.

    Returns False (and changes nothing) for unknown medicines or short stock.
    """
    updated = (
        InventoryItem.objects.using(using)
        .filter(medicine=medicine, stock__gte=qty)
        .update(stock=F('stock') - qty)
    )
    return updated > 0


def submit_record(
    staff: Optional[User],
    *,
    roll_no: str,
    diagnosis: str,
    remarks: Optional[str] = None,
    medications: Iterable[Mapping] = (),
    using: str = DEFAULT_DB_ALIAS,
) -> VisitRecord:
    student = User.objects.using(using).filter(roll_no=roll_no, role=User.ROLE_STUDENT).first()
    if not student:
        raise NotFound('Student not found.')

    lines = [(m['name'], int(m['qty'])) for m in medications]
    try:
        with transaction.atomic(using=using):
            record = VisitRecord.objects.using(using).create(
                student=student, diagnosis=diagnosis, remarks=remarks or None,
            )
            for name, qty in lines:
                DispensedLine.objects.using(using).create(visit=record, medicine_name=name, quantity=qty)
                if not decrement_stock(name, qty, using=using):
                    raise InsufficientStock(name)
    except InsufficientStock as exc:
        logger.warning('Record for %s rolled back: not enough stock for %s', roll_no, exc.medicine)
        raise

    logger.info('Record %s saved for %s with %d medicine line(s)', record.pk, roll_no, len(lines))
    try:
        log_action(user=staff, action='record_submit', object_type='visit_record', object_id=record.pk,
                   detail={'rollNo': roll_no, 'medications': [{'name': n, 'qty': q} for n, q in lines]})
    except Exception:
        logger.exception('Audit write failed for record %s', record.pk)
    return record
