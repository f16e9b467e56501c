from rest_framework import serializers

class AuditLogQuerySerializer(serializers.Serializer):
    userId = serializers.IntegerField(min_value=1, required=False)
    entityType = serializers.CharField(max_length=64, required=False)
    action = serializers.CharField(max_length=64, required=False)
    startDate = serializers.DateTimeField(required=False)
    endDate = serializers.DateTimeField(required=False)
    limit = serializers.IntegerField(min_value=1, max_value=1000, required=False)
