from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    nurse_id = serializers.CharField(max_length=50)
    password = serializers.CharField(trim_whitespace=False)

    def validate_nurse_id(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Nurse ID is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v
