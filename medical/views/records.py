"""
Visit record views.

Staff submit records (which dispenses medicines from the inventory) and
browse the day-log; students and staff read a student's visit history.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from medical.permissions import IsMedicalStaff, ensure_can_read_roll
from medical.serializers.records import DayLogQuerySerializer, RecordSubmitSerializer
from medical.services.queries import day_log, parse_day, visit_history
from medical.services.records import submit_record


@api_view(['POST'])
@permission_classes([IsMedicalStaff])
def staff_submit_record(request):
    """Save a visit record and dispense its medicines in one transaction.

    Body: ``roll_no``, ``diagnosis``, optional ``remarks`` and
    ``medications`` (a list of ``{"name": ..., "qty": ...}``). Fails with
    a message naming the medicine when any line exceeds its stock, in
    which case nothing is saved.
    """
    s = RecordSubmitSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    record = submit_record(
        request.user,
        roll_no=vd['roll_no'],
        diagnosis=vd['diagnosis'],
        remarks=vd.get('remarks'),
        medications=vd.get('medications') or [],
    )
    return Response(
        {'success': True, 'message': 'Record saved successfully.', 'data': {'recordId': record.id}},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsMedicalStaff])
def staff_day_log(request):
    q = DayLogQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    day = parse_day(q.validated_data.get('date'))
    return Response({'success': True, 'date': day.isoformat(), 'data': day_log(day)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_records(request, rollno: str):
    ensure_can_read_roll(request.user, rollno)
    return Response({'success': True, 'data': visit_history(rollno)})
