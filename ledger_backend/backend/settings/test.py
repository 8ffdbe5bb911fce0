# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory SQLite (fast, isolated)
- Quiet logging (only warnings and above reach the console)
- Single transaction attempt so conflicts surface immediately
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LEDGER_TRANSACTION_MAX_ATTEMPTS = 1

for _logger in LOGGING["loggers"].values():
    _logger["level"] = "WARNING"
