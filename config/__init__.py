from .settings import (
    CLASSIFICATION_TEMPERATURE,
    CLASSIFICATION_TIMEOUT_SECONDS,
    DEFAULT_MODEL,
    DOWNLOAD_TIMEOUT_SECONDS,
    GST_ALLOWED,
    INVENTORY_TEMPERATURE,
    INVENTORY_TIMEOUT_SECONDS,
    INVOICE_TEMPERATURE,
    INVOICE_TIMEOUT_SECONDS,
    LOG_FILE,
    LOG_LEVEL,
    MAX_ATTEMPTS,
    MAX_OCR_CHARS,
    OPENAI_API_KEY,
    QTY_DEFAULT,
    QTY_MAX,
    QTY_MIN,
    RETRY_DELAY_SECONDS,
    RETRY_STATUSES,
    VISION_MODEL,
)

__all__ = [
    "CLASSIFICATION_TEMPERATURE",
    "CLASSIFICATION_TIMEOUT_SECONDS",
    "DEFAULT_MODEL",
    "DOWNLOAD_TIMEOUT_SECONDS",
    "GST_ALLOWED",
    "INVENTORY_TEMPERATURE",
    "INVENTORY_TIMEOUT_SECONDS",
    "INVOICE_TEMPERATURE",
    "INVOICE_TIMEOUT_SECONDS",
    "LOG_FILE",
    "LOG_LEVEL",
    "MAX_ATTEMPTS",
    "MAX_OCR_CHARS",
    "OPENAI_API_KEY",
    "QTY_DEFAULT",
    "QTY_MAX",
    "QTY_MIN",
    "RETRY_DELAY_SECONDS",
    "RETRY_STATUSES",
    "VISION_MODEL",
]
