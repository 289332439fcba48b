"""
Django settings for books_project.

Every deploy-time value is read from the environment so the same module
serves local runs, tests and containers.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [
    h.strip()
    for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if h.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_filters",
    "books_core",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    # attaches request.company from the X-Tenant-ID header
    "books_core.middleware.CurrentCompanyMiddleware",
]

ROOT_URLCONF = "books_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "books_project.wsgi.application"

# ---------- Database ----------
# SQLite by default; set BOOKS_DB_ENGINE=postgresql for PostgreSQL
DB_ENGINE = os.environ.get("BOOKS_DB_ENGINE", "sqlite3")
if DB_ENGINE == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("BOOKS_DB_NAME", "books"),
            "USER": os.environ.get("BOOKS_DB_USER", "books"),
            "PASSWORD": os.environ.get("BOOKS_DB_PASSWORD", ""),
            "HOST": os.environ.get("BOOKS_DB_HOST", "localhost"),
            "PORT": os.environ.get("BOOKS_DB_PORT", "5432"),
            # one transaction per posting / payment request
            "ATOMIC_REQUESTS": False,
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.environ.get("BOOKS_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ---------- Cache (backs the record-lock store) ----------
CACHES = {
    "default": {
        "BACKEND": os.environ.get(
            "BOOKS_CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"
        ),
        "LOCATION": os.environ.get("BOOKS_CACHE_LOCATION", "books-locks"),
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("BOOKS_TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# ---------- Celery ----------
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "memory://")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", None)
CELERY_TASK_ALWAYS_EAGER = env_bool("CELERY_TASK_ALWAYS_EAGER", True)
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# ---------- Bookkeeping ----------
# Chart-of-accounts codes the ledger poster books against
BOOKS_POSTING_ACCOUNTS = {
    "accounts_payable": os.environ.get("BOOKS_AP_ACCOUNT", "3101"),
    "input_cgst": os.environ.get("BOOKS_INPUT_CGST_ACCOUNT", "1501"),
    "input_sgst": os.environ.get("BOOKS_INPUT_SGST_ACCOUNT", "1502"),
    "input_igst": os.environ.get("BOOKS_INPUT_IGST_ACCOUNT", "1503"),
    "input_cess": os.environ.get("BOOKS_INPUT_CESS_ACCOUNT", "1504"),
    "tds_payable": os.environ.get("BOOKS_TDS_PAYABLE_ACCOUNT", "3300"),
}

# Seconds an advisory record lock survives without being refreshed
BOOKS_RECORD_LOCK_TTL = int(os.environ.get("BOOKS_RECORD_LOCK_TTL", "300"))

# Default page size for list endpoints
BOOKS_DEFAULT_PAGE_SIZE = int(os.environ.get("BOOKS_DEFAULT_PAGE_SIZE", "100"))

# ---------- Logging ----------
BOOKS_LOG_LEVEL = os.environ.get("BOOKS_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "books_core": {
            "handlers": ["console"],
            "level": BOOKS_LOG_LEVEL,
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
