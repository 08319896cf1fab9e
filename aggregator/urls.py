"""
URL patterns for the aggregator API.

This module defines the URL routing configuration for account validation,
which combines verdicts from multiple data providers.
"""
from django.urls import path

from .views import ValidateAccountView

app_name = "aggregator"

urlpatterns = [
    path("validate/", ValidateAccountView.as_view(), name="validate-account"),
]
