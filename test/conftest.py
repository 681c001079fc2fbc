from __future__ import annotations

import os
from pathlib import Path

import aiosmtplib
import pytest
from dotenv import load_dotenv

TEST_ROOT = Path(__file__).resolve().parent
# Load test/.env first, then fallback to test/.env.example for defaults
load_dotenv(TEST_ROOT / ".env", override=False)
load_dotenv(TEST_ROOT / ".env.example", override=False)

# Tests never talk to real databases or monitoring backends
os.environ.setdefault("DB_ENV", "local")
os.environ.setdefault("APP_ENV", "test")
os.environ["LOGFIRE_ENABLED"] = "false"


@pytest.fixture(autouse=True)
def _global_offline_smtp_guard(monkeypatch: pytest.MonkeyPatch):
    """Fail loudly if a test tries to open a real SMTP connection."""

    async def offline_connect(self, *args, **kwargs):
        raise RuntimeError(f"SMTP blocked by global offline guard: {self.hostname}:{self.port}")

    monkeypatch.setattr(aiosmtplib.SMTP, "connect", offline_connect, raising=True)
