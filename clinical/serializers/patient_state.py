from rest_framework import serializers

from clinical.models import PatientState

class TransitionSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    toState = serializers.ChoiceField(choices=PatientState.choices)
    context = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)

class PatientListQuerySerializer(serializers.Serializer):
    state = serializers.ChoiceField(choices=PatientState.choices, required=False)
    q = serializers.CharField(max_length=64, required=False)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)
