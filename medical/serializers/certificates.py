from django.conf import settings
from rest_framework import serializers


class CertificateCreateSerializer(serializers.Serializer):
    serialNo = serializers.CharField(max_length=64)
    recordId = serializers.IntegerField(min_value=1)
    age = serializers.IntegerField(min_value=1, max_value=150)
    gender = serializers.CharField(max_length=16)
    relaxations = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    rollNo = serializers.CharField(required=False, allow_blank=True, max_length=32)
    pdf = serializers.FileField()

    def validate_serialNo(self, v):
        v = v.strip()
        if not v:
            raise serializers.ValidationError('Serial number cannot be blank.')
        return v

    def validate_pdf(self, f):
        size_mb = (f.size or 0) / (1024 * 1024)
        if size_mb > settings.UPLOAD_MAX_MB:
            raise serializers.ValidationError('File is too large.')
        ctype = getattr(f, 'content_type', '') or ''
        if not any(ctype.startswith(prefix) for prefix in settings.ALLOWED_UPLOAD_TYPES):
            raise serializers.ValidationError('Unsupported file type.')
        return f
