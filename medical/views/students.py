from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from medical.permissions import IsStudent
from medical.serializers.students import HostelDetailsSerializer
from medical.services.students import get_student, update_hostel_details


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_name(request, rollno: str):
    """Display name of a student, used by staff while filling in a record."""
    student = get_student(rollno)
    return Response({'success': True, 'data': {'roll_no': student.roll_no, 'name': student.name}})


@api_view(['PUT'])
@permission_classes([IsStudent])
def hostel_details(request):
    s = HostelDetailsSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    updated = update_hostel_details(
        request.user,
        hostel_no=s.validated_data.get('hostel_no'),
        room_no=s.validated_data.get('room_no'),
    )
    if updated != 1:
        return Response({'success': False, 'error': 'Student not found or update failed.'},
                        status=status.HTTP_404_NOT_FOUND)
    return Response({
        'success': True,
        'message': 'Hostel details updated successfully.',
        'data': {'hostel_no': s.validated_data.get('hostel_no'), 'room_no': s.validated_data.get('room_no')},
    })
