"""
Django settings for the clinic front-desk project.

Values are read from the environment, with an optional ``.env`` file in
the project root for local development.  In production set real
environment variables rather than relying on the ``.env`` file.
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

# -----------------------------------------------------------------------------
# Base & .env loading
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


# -----------------------------------------------------------------------------
# Core flags & security baseline
# -----------------------------------------------------------------------------
ENV = os.getenv("ENV", "dev")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env_flag("DEBUG")

ALLOWED_HOSTS: list[str] = [
    h.strip() for h in os.getenv("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",") if h.strip()
]

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv("SECRET_KEY") or "replace-me-with-a-secure-secret-key"

if ENV == "prod":
    if DEBUG:
        raise RuntimeError("DEBUG must be 0 in prod")
    if "*" in ALLOWED_HOSTS:
        raise RuntimeError("ALLOWED_HOSTS cannot contain * in prod")
    if SECRET_KEY == "replace-me-with-a-secure-secret-key":
        raise RuntimeError("SECRET_KEY must be set securely in prod")

# -----------------------------------------------------------------------------
# Applications
# -----------------------------------------------------------------------------
INSTALLED_APPS = [
    "django_prometheus",
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party apps
    "rest_framework",
    "drf_yasg",
    # Local apps
    "frontdesk",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "clinic.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "clinic.wsgi.application"
ASGI_APPLICATION = "clinic.asgi.application"

# -----------------------------------------------------------------------------
# Database configuration
# Priority:
#   1) Explicit PostgreSQL env vars (POSTGRES_* or DB_* aliases)
#   2) DATABASE_URL (parsed by dj_database_url)
#   3) SQLite fallback
# -----------------------------------------------------------------------------
DB_CONN_MAX_AGE = int(os.getenv("DB_CONN_MAX_AGE", "120"))

pg_name = os.getenv("POSTGRES_DB") or os.getenv("DB_NAME")
pg_user = os.getenv("POSTGRES_USER") or os.getenv("DB_USER")
pg_password = os.getenv("POSTGRES_PASSWORD") or os.getenv("DB_PASSWORD")
pg_host = os.getenv("POSTGRES_HOST") or os.getenv("DB_HOST", "localhost")
pg_port = os.getenv("POSTGRES_PORT") or os.getenv("DB_PORT", "5432")

if pg_name and pg_user:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": pg_name,
            "USER": pg_user,
            "PASSWORD": pg_password or "",
            "HOST": pg_host,
            "PORT": str(pg_port),
            "CONN_MAX_AGE": DB_CONN_MAX_AGE,
        }
    }
else:
    database_url = os.getenv("DATABASE_URL", "").strip()
    if database_url:
        import dj_database_url  # type: ignore

        DATABASES = {
            "default": dj_database_url.parse(
                database_url,
                conn_max_age=DB_CONN_MAX_AGE,
            )
        }
    else:
        DATABASES = {
            "default": {
                "ENGINE": "django.db.backends.sqlite3",
                "NAME": (BASE_DIR / "db.sqlite3").as_posix(),
            }
        }

# -----------------------------------------------------------------------------
# Password validation (Django admin users only; nurses are not Django users)
# -----------------------------------------------------------------------------
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# -----------------------------------------------------------------------------
# Internationalization & static/media
# -----------------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------------------------------------------
# DRF
# Nurses authenticate with a plain credential check at /api/auth/login;
# no tokens or sessions are issued, so every endpoint is open.
# -----------------------------------------------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_THROTTLE_CLASSES": (
        "rest_framework.throttling.ScopedRateThrottle",
    ),
    "DEFAULT_THROTTLE_RATES": {
        "login": os.getenv("LOGIN_RATE", "30/min"),
    },
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DATETIME_FORMAT": "iso-8601",
    "EXCEPTION_HANDLER": "frontdesk.exceptions.api_exception_handler",
}

# Avoid automatic slash appending to URLs (frontend uses no trailing slash)
APPEND_SLASH = False

# -----------------------------------------------------------------------------
# Swagger / OpenAPI
# -----------------------------------------------------------------------------
SWAGGER_SETTINGS = {
    "DEFAULT_INFO": "clinic.urls.api_info",
    "SECURITY_DEFINITIONS": {},
}

# -----------------------------------------------------------------------------
# CORS: the mobile front-end calls from arbitrary origins during development
# -----------------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = [
    h.strip() for h in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",") if h.strip()
]
CORS_ALLOW_ALL_ORIGINS = env_flag("CORS_ALLOW_ALL_ORIGINS", "1" if ENV == "dev" else "0")

# -----------------------------------------------------------------------------
# Front-desk behaviour
# -----------------------------------------------------------------------------
# Development-only sample data, applied by `manage.py init_clinic`.
SEED_SAMPLE_DATA = env_flag("SEED_SAMPLE_DATA")
# Convert a legacy `oid` photo column to `bytea` on startup (PostgreSQL only).
REPAIR_PHOTO_COLUMN = env_flag("REPAIR_PHOTO_COLUMN", "1")
# auto | with_photo | without_photo
PHOTO_WRITE_MODE = os.getenv("PHOTO_WRITE_MODE", "auto")
if PHOTO_WRITE_MODE not in {"auto", "with_photo", "without_photo"}:
    raise RuntimeError("PHOTO_WRITE_MODE must be one of auto, with_photo, without_photo")

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "frontdesk": {
            "level": LOG_LEVEL,
        },
        "django": {
            "handlers": [],
            "level": "WARNING",
        },
    },
}

# -----------------------------------------------------------------------------
# Security & proxy headers (enable in prod behind TLS)
# -----------------------------------------------------------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True
if ENV == "prod":
    SECURE_HSTS_SECONDS = int(os.getenv("SECURE_HSTS_SECONDS", "3600"))
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = False
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True
    SECURE_SSL_REDIRECT = env_flag("SECURE_SSL_REDIRECT", "1")
