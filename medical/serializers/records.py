import html

import bleach
from rest_framework import serializers


def clean_text(v):
    """Strip markup but keep characters such as ``&`` and ``<`` as typed."""
    return html.unescape(bleach.clean((v or '').strip(), tags=[], strip=True)).strip()


class MedicationLineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    qty = serializers.IntegerField(min_value=1, max_value=2**31 - 1)

    def validate_name(self, v):
        return v.strip()


class RecordSubmitSerializer(serializers.Serializer):
    roll_no = serializers.CharField(max_length=32)
    diagnosis = serializers.CharField()
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    medications = MedicationLineSerializer(many=True, required=False, allow_null=True)

    def validate_roll_no(self, v):
        return v.strip()

    def validate_diagnosis(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Diagnosis cannot be blank.')
        return v

    def validate_remarks(self, v):
        return clean_text(v) or None


class DayLogQuerySerializer(serializers.Serializer):
    date = serializers.CharField(required=False, allow_blank=True)
