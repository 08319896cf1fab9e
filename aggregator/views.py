"""
API views for the aggregator module.

This module defines the account validation endpoint, which asks every selected
data provider whether an account number is valid and returns all verdicts
together.
"""
import logging

from drf_spectacular.utils import (
    OpenApiExample,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from . import validate_account
from .renderers import HTMLSafeJSONRenderer
from .serializers import (
    ErrorSerializer,
    ValidationRequestSerializer,
    ValidationResponseSerializer,
)

logger = logging.getLogger(__name__)

ACCOUNT_NUMBER_ERRORS = {
    "required": "account number missing from payload",
    "null": "account number missing from payload",
    "blank": "account number must not be blank",
    "invalid": "account number must be a string",
}


def _error_message(errors) -> str:
    """Collapse serializer errors into the single message returned to clients."""
    if "accountNumber" in errors:
        code = getattr(errors["accountNumber"][0], "code", None)
        return ACCOUNT_NUMBER_ERRORS.get(code, "invalid account number")
    if "providers" in errors:
        return "providers must be a list of provider names"
    return "invalid json payload"


@extend_schema_view(
    post=extend_schema(
        summary="Validate a bank account number",
        description=(
            "Asks every selected data provider, in parallel, whether the account number is valid. "
            "Returns one result per selected provider. Providers that fail or do not answer "
            "within the per-call timeout are reported as isValid=false."
        ),
        request=ValidationRequestSerializer,
        examples=[
            OpenApiExample(
                "All providers",
                summary="Ask every configured provider",
                value={"accountNumber": "12345678"},
                request_only=True,
            ),
            OpenApiExample(
                "Selected providers",
                summary="Ask only some providers",
                value={"accountNumber": "12345678", "providers": ["provider1", "provider2"]},
                request_only=True,
            ),
        ],
        responses={
            200: OpenApiResponse(
                response=ValidationResponseSerializer,
                description="Verdicts from every selected provider",
                examples=[
                    OpenApiExample(
                        "Successful Response",
                        value={
                            "results": [
                                {"provider": "provider1", "isValid": True},
                                {"provider": "provider2", "isValid": False},
                            ]
                        },
                    )
                ],
            ),
            400: OpenApiResponse(
                response=ErrorSerializer,
                description="Invalid payload",
                examples=[
                    OpenApiExample(
                        "Missing account number",
                        value={"error": "account number missing from payload"},
                    ),
                    OpenApiExample(
                        "Invalid JSON",
                        value={"error": "invalid json payload"},
                    ),
                ],
            ),
            500: OpenApiResponse(response=ErrorSerializer, description="Server error"),
        },
        tags=["Accounts"],
    )
)
class ValidateAccountView(APIView):
    """
    API endpoint to validate a bank account number against the data providers.

    This is a public endpoint - no authentication required.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [JSONParser]
    renderer_classes = [HTMLSafeJSONRenderer]

    def post(self, request, *args, **kwargs):
        try:
            payload = request.data
        except ParseError as e:
            logger.info(f"Rejected unparseable payload: {e}")
            return Response(
                {"error": "invalid json payload"}, status=status.HTTP_400_BAD_REQUEST
            )

        serializer = ValidationRequestSerializer(data=payload)
        if not serializer.is_valid():
            logger.info(f"Rejected payload: {serializer.errors}")
            return Response(
                {"error": _error_message(serializer.errors)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = validate_account(
                serializer.validated_data["accountNumber"],
                serializer.get_provider_names(),
            )
        except Exception as e:
            logger.exception(f"Account validation failed: {e}")
            return Response(
                {"error": "account validation failed"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(ValidationResponseSerializer(result).data)
