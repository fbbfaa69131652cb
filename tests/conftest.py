"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or mail relay
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("MAIL_BACKEND", "log")
os.environ.setdefault("LOG_FORMAT", "text")
