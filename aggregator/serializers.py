"""
Serializers for the account validation API.
"""
from rest_framework import serializers


class StrictCharField(serializers.CharField):
    """
    CharField that refuses numbers instead of coercing them to strings.

    Values are kept exactly as sent: no whitespace trimming.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault("trim_whitespace", False)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail("invalid")
        return super().to_internal_value(data)


class ValidationRequestSerializer(serializers.Serializer):
    """
    Inbound payload: ``{"accountNumber": "...", "providers": ["..."]}``.

    ``providers`` is optional. Leaving it out (or sending null) asks every
    configured provider; an empty list asks none.
    """

    accountNumber = StrictCharField(allow_blank=False)
    providers = serializers.ListField(
        child=StrictCharField(allow_blank=True),
        required=False,
        allow_null=True,
        allow_empty=True,
    )

    def get_provider_names(self):
        return self.validated_data.get("providers")


class ProviderOutcomeSerializer(serializers.Serializer):
    provider = serializers.CharField(source="provider_name")
    isValid = serializers.BooleanField(source="is_valid")


class ValidationResponseSerializer(serializers.Serializer):
    results = ProviderOutcomeSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
