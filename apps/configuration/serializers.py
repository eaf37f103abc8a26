"""
apps.configuration.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O serializers for the status endpoint – no business logic.
"""
from rest_framework import serializers


class StatusSerializer(serializers.Serializer):
    name = serializers.CharField()
    version = serializers.CharField()
    mode = serializers.ChoiceField(choices=["katello", "headpin"])
