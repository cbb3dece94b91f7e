import bleach
from rest_framework import serializers


class HostelDetailsSerializer(serializers.Serializer):
    hostel_no = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    room_no = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)

    def _clean(self, v):
        v = bleach.clean((v or '').strip(), strip=True)
        return v or None

    def validate_hostel_no(self, v):
        return self._clean(v)

    def validate_room_no(self, v):
        return self._clean(v)
