import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Build paths
BASE_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = Path(os.getenv("LOG_DIR", BASE_DIR / "logs"))

# Security settings
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "your-secret-key-here")
DEBUG = os.getenv("DJANGO_DEBUG", "True") == "True"

# When in DEBUG mode, allow all hosts for ease of development
if DEBUG:
    ALLOWED_HOSTS = ["*"]
else:
    ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# Application definition
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django.contrib.staticfiles",
    # Third party apps
    "rest_framework",
    "corsheaders",
    "drf_spectacular",  # OpenAPI 3.0 schema generator
    "drf_spectacular_sidecar",  # Required for Swagger UI
    # Local apps (providers must load before aggregator)
    "providers",
    "aggregator",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "account_check.middleware.RequestIDMiddleware",
    "account_check.middleware.RequestLoggingMiddleware",
]

# CORS settings
if DEBUG:
    CORS_ALLOW_ALL_ORIGINS = True  # Only in development
else:
    CORS_ALLOW_ALL_ORIGINS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    CORS_ALLOW_METHODS = [
        "GET",
        "OPTIONS",
        "POST",
    ]
    CORS_EXPOSE_HEADERS = ["x-request-id"]

ROOT_URLCONF = "account_check.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "account_check.wsgi.application"

# No persistence: provider verdicts are never stored
DATABASES = {}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Bank account data providers. PROVIDERS is a YAML document:
#
#   providers:
#   - name: provider1
#     url: https://provider1.com/v1/api/account/validate
#
# In production it is injected from the parameter store.
PROVIDERS = os.getenv("PROVIDERS")

# Providers are guaranteed to answer within a second; the API answers within two.
PROVIDER_TIMEOUT_SECONDS = os.getenv("PROVIDER_TIMEOUT_SECONDS", "1.0")
RESPONSE_BUDGET_SECONDS = os.getenv("RESPONSE_BUDGET_SECONDS", "2.0")
AGGREGATOR_MAX_WORKERS = os.getenv("AGGREGATOR_MAX_WORKERS", "32")

# REST Framework settings
REST_FRAMEWORK = {
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "EXCEPTION_HANDLER": "rest_framework.views.exception_handler",
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "aggregator.renderers.HTMLSafeJSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ],
}

# DRF Spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Bank Account Check API",
    "DESCRIPTION": "Validates bank account numbers against third-party data providers",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    # Use SIDECAR values for Swagger UI instead of module paths
    "SWAGGER_UI_DIST": "SIDECAR",
    "SWAGGER_UI_FAVICON_HREF": "SIDECAR",
    "REDOC_DIST": "SIDECAR",
    "SWAGGER_UI_SETTINGS": {
        "deepLinking": True,
        "displayOperationId": True,
        "docExpansion": "list",
    },
    "SORT_OPERATIONS": False,
}

# Logging configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "json": {
            "()": "json_log_formatter.JSONFormatter",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "json_file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": os.path.join(LOG_DIR, "account_check.json"),
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "formatter": "json",
        },
        "error_file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": os.path.join(LOG_DIR, "error.log"),
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "formatter": "verbose",
            "level": "ERROR",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console", "json_file"],
            "level": "INFO",
        },
        "django.request": {
            "handlers": ["console", "error_file"],
            "level": "ERROR",
            "propagate": False,
        },
        "account_check": {
            "handlers": ["console", "json_file"],
            "level": "INFO",
            "propagate": False,
        },
        "providers": {
            "handlers": ["console", "json_file"],
            "level": "INFO",
            "propagate": False,
        },
        "aggregator": {
            "handlers": ["console", "json_file"],
            "level": "INFO",
            "propagate": False,
        },
    },
    "root": {
        "handlers": ["console", "error_file"],
        "level": os.getenv("DJANGO_LOG_LEVEL", "WARNING"),
    },
}

# Security settings for production
if not DEBUG:
    SECURE_SSL_REDIRECT = True
    SECURE_HSTS_SECONDS = 31536000  # 1 year
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
    SECURE_CONTENT_TYPE_NOSNIFF = True
    SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"

# Ensure we have a logs directory
os.makedirs(LOG_DIR, exist_ok=True)
