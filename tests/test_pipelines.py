import json

import pytest

from domain.canonical import ExtractionRequest
from domain.errors import ParseError, UpstreamFatalError, ValidationError
from extraction.to_canonical import classify_product, extract_invoice, generate_inventory


def _user_message(call):
    return call["messages"][1]["content"]


def test_generate_inventory_from_fenced_table(fake_client, sleeps, table_reply, dove_row):
    client = fake_client("```markdown\n" + table_reply(dove_row) + "\n```")
    records = generate_inventory(ExtractionRequest(brand="Dove", requested_qty=6), client=client, sleep=sleeps)
    assert [r["sku"] for r in records] == ["DOV-SOAP-100"]
    assert "Generate 6 products" in _user_message(client.calls[0])
    assert "Brand: Dove" in _user_message(client.calls[0])
    assert client.calls[0]["timeout"] == 20


def test_custom_prompt_replaces_generated_one(fake_client, sleeps, table_reply, dove_row):
    client = fake_client(table_reply(dove_row))
    generate_inventory(ExtractionRequest(prompt="10 Dove soaps"), client=client, sleep=sleeps)
    assert _user_message(client.calls[0]).endswith("10 Dove soaps")


def test_json_and_table_replies_produce_identical_records(fake_client, sleeps, table_reply):
    products = [
        {
            "productName": "Dove Soap",
            "brand": "Dove",
            "category": "Personal Care",
            "sku": "DOV-SOAP-100",
            "unit": "100g Bar",
            "hsnCode": "3401",
            "gstRate": 18,
            "pricingMode": "MRP_INCLUSIVE",
            "mrp": 59,
            "costPrice": 40,
        },
        {
            "productName": "Surf Excel",
            "brand": "Surf",
            "category": "Detergent",
            "sku": "SRF-1KG",
            "unit": "1kg Pack",
            "hsnCode": "3402",
            "gstRate": 18,
            "pricingMode": "BASE_PLUS_GST",
            "basePrice": 99.5,
        },
    ]
    table = table_reply(
        "| Dove Soap | Dove | Personal Care | DOV-SOAP-100 | 100g Bar | 3401 | 18 | MRP_INCLUSIVE |  | 59 | 40 |",
        "| Surf Excel | Surf | Detergent | SRF-1KG | 1kg Pack | 3402 | 18 | BASE_PLUS_GST | 99.5 |  |  |",
    )
    request = ExtractionRequest(brand="Mixed")

    from_json = generate_inventory(request, client=fake_client(json.dumps(products)), sleep=sleeps)
    from_table = generate_inventory(request, client=fake_client(table), sleep=sleeps)

    assert len(from_json) == 2
    assert from_json == from_table


def test_reply_without_table_or_json_is_fatal(fake_client, sleeps):
    with pytest.raises(ParseError):
        generate_inventory(ExtractionRequest(), client=fake_client("I cannot do that."), sleep=sleeps)


def test_all_rows_corrupted_returns_empty_list(fake_client, sleeps, table_reply):
    client = fake_client(table_reply("| *broken | row |"))
    assert generate_inventory(ExtractionRequest(), client=client, sleep=sleeps) == []


def test_upstream_failure_propagates(fake_client, sleeps, status_error):
    client = fake_client(status_error(429), status_error(429))
    with pytest.raises(UpstreamFatalError):
        generate_inventory(ExtractionRequest(), client=client, sleep=sleeps)
    assert len(client.calls) == 2


def test_extract_invoice_embeds_ocr_text(fake_client, sleeps):
    client = fake_client('{"customerName": "Ravi", "total": 100}')
    record = extract_invoice("INVOICE #12\nRavi\nTotal 100", client=client, sleep=sleeps)
    assert record["customerName"] == "Ravi"
    assert record["total"] == 100.0
    assert "INVOICE #12" in _user_message(client.calls[0])


def test_extract_invoice_degrades_to_sentinel(fake_client, sleeps):
    client = fake_client("```\nThis is not JSON\n```")
    record = extract_invoice("raw ocr", client=client, sleep=sleeps)
    assert record == {"error": True, "rawText": "raw ocr", "rawReply": "This is not JSON"}


def test_extract_invoice_requires_text(fake_client, sleeps):
    client = fake_client("{}")
    with pytest.raises(ValidationError):
        extract_invoice("   ", client=client, sleep=sleeps)
    assert client.calls == []


def test_classify_product_requests_json_object(fake_client, sleeps):
    client = fake_client('{"hsn": "0405", "gst": 12, "confidence": "medium", "reference": "Butter"}')
    record = classify_product("Amul Butter", "Amul", "Dairy", "100g", client=client, sleep=sleeps)
    assert record["hsn"] == "0405"
    call = client.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    assert call["timeout"] == 18
    assert "Product Name: Amul Butter" in _user_message(call)


def test_classify_product_requires_name(fake_client, sleeps):
    with pytest.raises(ValidationError):
        classify_product("", client=fake_client("{}"), sleep=sleeps)
