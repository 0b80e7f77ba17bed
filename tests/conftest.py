"""Test environment: settings must load without a real .env or database."""

import os

os.environ.setdefault("JWT_SECRET", "test-only-signing-secret-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")
