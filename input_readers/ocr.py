"""
OCR collaborator.

The invoice pipeline only needs "image bytes in, one block of text out".
VisionOcr fills that role with an OpenAI vision-capable model; any object with
a matching `extract_text` method can be passed instead.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Protocol

from config import INVOICE_TIMEOUT_SECONDS, VISION_MODEL
from extraction.llm_client import call_chat
from extraction.normalizer import normalize_reply
from extraction.prompts import OCR_INSTRUCTION

from .image import bytes_to_data_url


class OcrService(Protocol):
    def extract_text(self, data: bytes, mime_type: str) -> str:
        ...


class VisionOcr:
    def __init__(
        self,
        client: Any = None,
        model: str = VISION_MODEL,
        timeout: float = INVOICE_TIMEOUT_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.model = model
        self.timeout = timeout
        self.sleep = sleep

    def extract_text(self, data: bytes, mime_type: str) -> str:
        data_url = bytes_to_data_url(data, mime_type)
        reply = call_chat(
            [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": OCR_INSTRUCTION},
                        {"type": "image_url", "image_url": {"url": data_url}},
                    ],
                },
            ],
            timeout=self.timeout,
            model=self.model,
            client=self.client,
            sleep=self.sleep,
        )
        return normalize_reply(reply)
