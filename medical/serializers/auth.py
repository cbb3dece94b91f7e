from rest_framework import serializers

from medical.models import User


class LoginSerializer(serializers.Serializer):
    roll_no = serializers.CharField()
    password = serializers.CharField()
    role = serializers.ChoiceField(choices=[User.ROLE_STUDENT, User.ROLE_STAFF])

    def validate_roll_no(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Roll number cannot be blank.')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password cannot be blank.')
        return v
