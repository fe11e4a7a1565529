import httpx

from api.handlers import generate_hsn_and_gst, generate_inventory_by_brand, parse_invoice_file


class FakeOcr:
    def __init__(self, text):
        self.text = text
        self.calls = []

    def extract_text(self, data, mime_type):
        self.calls.append((data, mime_type))
        return self.text


def _fetch(url):
    return "image/jpeg", b"jpeg-bytes"


def test_inventory_success(fake_client, sleeps, table_reply, dove_row):
    response = generate_inventory_by_brand(
        {"brand": "Dove", "quantity": 80}, client=fake_client(table_reply(dove_row)), sleep=sleeps
    )
    assert response.status_code == 200
    assert [item["sku"] for item in response.body["inventory"]] == ["DOV-SOAP-100"]


def test_inventory_quantity_is_clamped_in_prompt(fake_client, sleeps, table_reply, dove_row):
    client = fake_client(table_reply(dove_row))
    generate_inventory_by_brand({"brandName": "Dove", "quantity": 80}, client=client, sleep=sleeps)
    assert "Generate 50 products" in client.calls[0]["messages"][1]["content"]


def test_inventory_with_no_clean_rows(fake_client, sleeps, table_reply):
    response = generate_inventory_by_brand({}, client=fake_client(table_reply()), sleep=sleeps)
    assert response.status_code == 200
    assert response.body == {"inventory": [], "message": "No clean rows parsed"}


def test_inventory_parse_failure_is_an_error(fake_client, sleeps):
    response = generate_inventory_by_brand({}, client=fake_client("no table here"), sleep=sleeps)
    assert response.status_code == 500
    assert response.body == {"error": "No valid inventory table found"}


def test_inventory_upstream_failure_carries_details(fake_client, sleeps, status_error):
    response = generate_inventory_by_brand({}, client=fake_client(status_error(401)), sleep=sleeps)
    assert response.status_code == 500
    assert response.body["error"] == "OpenAI API Request Failed"
    assert "401" in response.body["details"]


def test_inventory_without_api_key(monkeypatch):
    import extraction.llm_client as llm_client

    monkeypatch.setattr(llm_client, "OPENAI_API_KEY", "")
    monkeypatch.setattr(llm_client, "_client", None)
    response = generate_inventory_by_brand({"brand": "Dove"})
    assert response.status_code == 500
    assert response.body == {"error": "OpenAI API key not configured"}


def test_invoice_requires_file_url():
    assert parse_invoice_file({}).status_code == 400
    assert parse_invoice_file({"fileUrl": 42}).body == {"error": "Missing or invalid fileUrl"}


def test_invoice_success(fake_client, sleeps):
    ocr = FakeOcr("Customer: Ravi\nTotal 100")
    response = parse_invoice_file(
        {"fileUrl": "https://files.example.com/inv.jpg"},
        ocr=ocr,
        fetch=_fetch,
        client=fake_client('{"customerName": "Ravi", "total": 100}'),
        sleep=sleeps,
    )
    assert response.status_code == 200
    assert response.body["structuredInvoice"]["customerName"] == "Ravi"
    assert ocr.calls == [(b"jpeg-bytes", "image/jpeg")]


def test_invoice_unparseable_reply_is_still_ok(fake_client, sleeps):
    response = parse_invoice_file(
        {"fileUrl": "https://files.example.com/inv.jpg"},
        ocr=FakeOcr("Customer: Ravi"),
        fetch=_fetch,
        client=fake_client("garbled"),
        sleep=sleeps,
    )
    assert response.status_code == 200
    assert response.body == {
        "structuredInvoice": {"error": True, "rawText": "Customer: Ravi", "rawReply": "garbled"}
    }


def test_invoice_without_text(fake_client, sleeps):
    client = fake_client()
    response = parse_invoice_file(
        {"fileUrl": "https://files.example.com/blank.png"},
        ocr=FakeOcr("  "),
        fetch=_fetch,
        client=client,
        sleep=sleeps,
    )
    assert response.body == {"message": "No text found", "structuredInvoice": {}}
    assert client.calls == []


def test_invoice_download_failure(fake_client, sleeps):
    def _failing_fetch(url):
        raise httpx.ConnectError("connection refused")

    response = parse_invoice_file(
        {"fileUrl": "https://files.example.com/inv.jpg"},
        ocr=FakeOcr("x"),
        fetch=_failing_fetch,
        client=fake_client(),
        sleep=sleeps,
    )
    assert response.status_code == 500
    assert response.body["error"] == "Internal server error"
    assert "connection refused" in response.body["details"]


def test_invoice_upstream_failure(fake_client, sleeps, status_error):
    response = parse_invoice_file(
        {"fileUrl": "https://files.example.com/inv.jpg"},
        ocr=FakeOcr("text"),
        fetch=_fetch,
        client=fake_client(status_error(503), status_error(503)),
        sleep=sleeps,
    )
    assert response.status_code == 500
    assert sleeps.delays == [1.2]


def test_classification_requires_product_name(fake_client):
    response = generate_hsn_and_gst({"brand": "Amul"}, client=fake_client())
    assert response.status_code == 400
    assert response.body == {"error": "Missing productName in request body."}


def test_classification_is_flattened(fake_client, sleeps):
    client = fake_client('{"hsn": "0405", "gst": 12}')
    response = generate_hsn_and_gst({"productName": "Amul Butter"}, client=client, sleep=sleeps)
    assert response.status_code == 200
    assert response.body == {"hsn": "0405", "gst": 12, "confidence": "low", "reference": ""}


def test_classification_sentinel_is_flattened_to_defaults(fake_client, sleeps):
    response = generate_hsn_and_gst({"productName": "Mystery"}, client=fake_client("???"), sleep=sleeps)
    assert response.status_code == 200
    assert response.body == {"hsn": "", "gst": "", "confidence": "low", "reference": ""}


def test_classification_upstream_failure(fake_client, sleeps, timeout_error):
    response = generate_hsn_and_gst({"productName": "Tea"}, client=fake_client(timeout_error()), sleep=sleeps)
    assert response.status_code == 500
    assert response.body["error"] == "OpenAI API Request Failed"
