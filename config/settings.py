"""
Central configuration for the extraction pipelines.

This module defines:
- LLM service settings (credentials, model ids) read from the environment / .env.
- Per-call upstream timeouts and the bounded retry policy.
- GST and quantity limits used by the normalization math.
- Logging settings consumed by config.logging.

All values are constants and should be imported where needed (no runtime logic here).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
VISION_MODEL = os.getenv("OPENAI_VISION_MODEL", "gpt-4o-mini")

INVENTORY_TIMEOUT_SECONDS = float(os.getenv("INVENTORY_TIMEOUT_SECONDS", "20"))
CLASSIFICATION_TIMEOUT_SECONDS = float(os.getenv("CLASSIFICATION_TIMEOUT_SECONDS", "18"))
INVOICE_TIMEOUT_SECONDS = float(os.getenv("INVOICE_TIMEOUT_SECONDS", "20"))
DOWNLOAD_TIMEOUT_SECONDS = float(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "30"))

# Upstream retry: one retry, only for rate-limit / unavailable.
RETRY_STATUSES = frozenset({429, 503})
MAX_ATTEMPTS = 2
RETRY_DELAY_SECONDS = 1.2

INVENTORY_TEMPERATURE = 0.3
INVOICE_TEMPERATURE = 0.1
CLASSIFICATION_TEMPERATURE = 0.2

GST_ALLOWED = (0, 5, 12, 18, 28)

QTY_MIN = 6
QTY_MAX = 50
QTY_DEFAULT = 10

MAX_OCR_CHARS = 25_000

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")
