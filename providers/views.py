"""
Views for the providers API.
"""
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import serializers
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from . import get_registry


class ProviderListSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    providers = serializers.ListField(child=serializers.CharField())


class ProviderListView(APIView):
    """
    List the names of the configured data providers.

    Clients use these names in the ``providers`` filter of the validation endpoint.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="List configured providers",
        responses={
            200: OpenApiResponse(
                response=ProviderListSerializer,
                examples=[
                    OpenApiExample(
                        "Providers",
                        value={"count": 2, "providers": ["provider1", "provider2"]},
                    )
                ],
            )
        },
        tags=["Providers"],
    )
    def get(self, request, *args, **kwargs):
        names = get_registry().names()
        return Response({"count": len(names), "providers": names})
