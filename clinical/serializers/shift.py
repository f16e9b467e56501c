from rest_framework import serializers

from clinical.models import ShiftStatus
from clinical.services.availability import is_valid_hhmm


def validate_hhmm(v):
    if not is_valid_hhmm(v):
        raise serializers.ValidationError('Expected a zero padded HH:mm time')
    return v


class WindowSerializer(serializers.Serializer):
    dayOfWeek = serializers.IntegerField(min_value=0, max_value=6)
    startTime = serializers.CharField(max_length=5, validators=[validate_hhmm])
    endTime = serializers.CharField(max_length=5, validators=[validate_hhmm])


class AvailabilitySerializer(WindowSerializer):
    isAvailable = serializers.BooleanField(required=False, default=True)


class DoctorShiftCreateSerializer(WindowSerializer):
    doctorId = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=ShiftStatus.choices, required=False, default=ShiftStatus.ACTIVE)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class NurseShiftCreateSerializer(WindowSerializer):
    nurseId = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=ShiftStatus.choices, required=False, default=ShiftStatus.ACTIVE)
    ward = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class ShiftStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ShiftStatus.choices)


class StaffListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=64, required=False)
    page = serializers.IntegerField(min_value=1, required=False)
    pageSize = serializers.IntegerField(min_value=1, required=False)
