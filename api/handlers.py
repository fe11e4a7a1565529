"""
Request handlers for the three extraction endpoints.

Each handler takes a parsed JSON request body and returns a HandlerResponse
(status code + JSON-ready body). Pipeline errors that reach this layer are
translated into error payloads here; nothing raises past a handler except
programming errors.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from config.logging import get_logger
from domain.canonical import ExtractionRequest
from domain.errors import ConfigurationError, ParseError, UpstreamError, ValidationError
from extraction.decoders import flatten_classification
from extraction.to_canonical import classify_product, extract_invoice, generate_inventory
from input_readers import OcrService, VisionOcr, download_file

LOG = get_logger("handlers")


@dataclass(frozen=True)
class HandlerResponse:
    status_code: int
    body: Dict[str, Any]


def _config_error(e: ConfigurationError) -> HandlerResponse:
    LOG.error("%s", e)
    return HandlerResponse(500, {"error": "OpenAI API key not configured"})


def _upstream_error(e: UpstreamError) -> HandlerResponse:
    return HandlerResponse(500, {"error": "OpenAI API Request Failed", "details": e.details})


def generate_inventory_by_brand(
    body: Optional[Mapping[str, Any]],
    *,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> HandlerResponse:
    """{prompt?, brand?, brandName?, category?, knownTypes?, quantity?, description?} -> {inventory}"""
    request = ExtractionRequest.from_body(body)

    try:
        inventory = generate_inventory(request, client=client, sleep=sleep)
    except ConfigurationError as e:
        return _config_error(e)
    except UpstreamError as e:
        return _upstream_error(e)
    except ParseError:
        return HandlerResponse(500, {"error": "No valid inventory table found"})

    if not inventory:
        return HandlerResponse(200, {"inventory": [], "message": "No clean rows parsed"})
    return HandlerResponse(200, {"inventory": inventory})


def parse_invoice_file(
    body: Optional[Mapping[str, Any]],
    *,
    ocr: Optional[OcrService] = None,
    fetch: Callable[[str], tuple[str, bytes]] = download_file,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> HandlerResponse:
    """{fileUrl} -> {structuredInvoice}"""
    file_url = (body or {}).get("fileUrl")
    if not file_url or not isinstance(file_url, str):
        return HandlerResponse(400, {"error": "Missing or invalid fileUrl"})

    ocr = ocr or VisionOcr(client=client, sleep=sleep)

    try:
        mime_type, data = fetch(file_url)
        raw_text = ocr.extract_text(data, mime_type)
        if not raw_text or not raw_text.strip():
            return HandlerResponse(200, {"message": "No text found", "structuredInvoice": {}})
        structured = extract_invoice(raw_text, client=client, sleep=sleep)
    except ConfigurationError as e:
        return _config_error(e)
    except (UpstreamError, httpx.HTTPError) as e:
        details = e.details if isinstance(e, UpstreamError) else str(e)
        LOG.error("parseInvoiceFile failed: %s", details)
        return HandlerResponse(500, {"error": "Internal server error", "details": details})

    return HandlerResponse(200, {"structuredInvoice": structured})


def generate_hsn_and_gst(
    body: Optional[Mapping[str, Any]],
    *,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> HandlerResponse:
    """{productName, brand?, category?, unit?} -> {hsn, gst, confidence, reference}"""
    body = body or {}

    def _s(key: str) -> str:
        value = body.get(key)
        return str(value) if value is not None else ""

    try:
        record = classify_product(
            _s("productName"),
            _s("brand"),
            _s("category"),
            _s("unit"),
            client=client,
            sleep=sleep,
        )
    except ValidationError as e:
        return HandlerResponse(400, {"error": str(e)})
    except ConfigurationError as e:
        return _config_error(e)
    except UpstreamError as e:
        return _upstream_error(e)

    return HandlerResponse(200, flatten_classification(record))
