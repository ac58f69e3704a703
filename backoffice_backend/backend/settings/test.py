# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

- In-memory SQLite (no external services)
- Fast password hashing
- Emails captured in django.core.mail.outbox
- No backoff sleeps between transaction retries
- Throttling effectively disabled
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK

DEBUG = False
SECRET_KEY = "test-secret-key-not-for-production"
ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "no-reply@example.com"

ORDER_STATUS_POLICY = "strict"
ORDER_TX_MAX_ATTEMPTS = 3
ORDER_TX_BACKOFF_SECONDS = 0.0

DB_CONNECT_MAX_ATTEMPTS = 2
DB_CONNECT_BACKOFF_SECONDS = 0.0

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        "anon": "10000/min",
        "user": "10000/min",
    },
}

LOGGING = {
    **LOGGING,
    "root": {"handlers": ["console"], "level": "CRITICAL"},
    "loggers": {
        name: {**config, "level": "CRITICAL"}
        for name, config in LOGGING["loggers"].items()
    },
}

SENTRY_DSN = ""
