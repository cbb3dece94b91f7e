"""
Medical certificate views.

Staff upload a generated certificate PDF together with its metadata;
students list their own certificates; downloads are open to the
owning student and to staff.
"""
from __future__ import annotations

import os

from django.core.files.storage import default_storage
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from medical.permissions import IsMedicalStaff, IsStudent, ensure_can_read_roll
from medical.serializers.certificates import CertificateCreateSerializer
from medical.services.certificates import attach_certificate, can_download, find_certificate_by_filename
from medical.services.queries import certificate_list, download_path


@api_view(['POST'])
@permission_classes([IsMedicalStaff])
@parser_classes([MultiPartParser, FormParser])
def generate_and_save_certificate(request):
    """Store the uploaded ``pdf`` and link it to a visit record by serial number."""
    s = CertificateCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    cert = attach_certificate(
        request.user,
        serial_no=vd['serialNo'],
        record_id=vd['recordId'],
        age=vd['age'],
        gender=vd['gender'],
        relaxations=vd.get('relaxations'),
        roll_no=vd.get('rollNo') or None,
        upload=vd['pdf'],
    )
    return Response({
        'success': True,
        'message': 'Certificate saved successfully.',
        'data': {
            'serial_no': cert.serial_no,
            'recordId': cert.visit_id,
            'file_path': cert.filename,
            'downloadPath': download_path(cert.filename),
        },
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsStudent])
def student_certificates(request, rollno: str):
    """A student's own certificates; staff browse certificates through visit history."""
    ensure_can_read_roll(request.user, rollno)
    return Response({'success': True, 'data': certificate_list(rollno)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def download_certificate(request, filename: str):
    if '..' in filename or os.path.isabs(filename) or '/' in filename or '\\' in filename:
        raise ValidationError({'detail': 'Invalid filename.'})
    cert = find_certificate_by_filename(filename)
    if not cert:
        raise NotFound('Certificate record not found.')
    if not can_download(request.user, cert):
        raise PermissionDenied('Forbidden.')
    if not default_storage.exists(cert.file.name):
        raise NotFound('File not found.')
    return FileResponse(default_storage.open(cert.file.name, 'rb'), as_attachment=True, filename=filename)
