from __future__ import annotations

from config import MAX_OCR_CHARS
from domain.canonical import ExtractionRequest

INVENTORY_SYSTEM_PROMPT = """
You are an expert inventory assistant for Indian retail.
Return ONLY a markdown table with the exact header:
| Product Name | Brand | Category | SKU | Unit | HSN | GST (%) | Pricing Mode | Base Price | MRP | Cost |

Rules:
- GST (%) must be one of: 0, 5, 12, 18, 28.
- Pricing Mode must be either "MRP_INCLUSIVE" or "BASE_PLUS_GST".
- If Pricing Mode = MRP_INCLUSIVE and MRP is given but Base Price missing → leave Base Price blank (system computes).
- If Pricing Mode = BASE_PLUS_GST and Base Price is given but MRP missing → leave MRP blank (system computes).
- Unit must include quantity + container (e.g., "100ml Bottle", "250g Jar", "1kg Pack", "50ml Tube").
- HSN must be a realistic Indian HSN (4–8 digits). If unsure, best guess.
- Cost is optional (approx market-estimate or blank).
- Output ONLY the table. No notes, no code fences.
""".strip()


INVOICE_PROMPT_TEMPLATE = """
You are an invoice extraction AI. Output only a strict JSON object. No markdown, no extra commentary. Use this format:

{{
  "customerName": "...",
  "customerPhone": "...",
  "invoiceDate": "...",
  "productList": [
    {{
      "name": "...",
      "quantity": ...,
      "unit": "...",
      "price": ...
    }}
  ],
  "subtotal": ...,
  "tax": ...,
  "total": ...
}}

Raw OCR Text:
\"\"\"
{ocr_text}
\"\"\"
""".strip()

INVOICE_SYSTEM_PROMPT = "You extract invoice fields from OCR text and return STRICT JSON only."


CLASSIFICATION_SYSTEM_PROMPT = """
You are a GST and HSN classification expert for Indian products. Given product details, respond ONLY with a strict JSON object in this format:
{
  "hsn": "...",
  "gst": ...,
  "confidence": "...",
  "reference": "..."
}
No markdown, no commentary, no explanations. If unsure, make your best guess and mention so in confidence.
""".strip()


OCR_INSTRUCTION = (
    "Transcribe ALL text visible in this document exactly as printed, line by line. "
    "Do not summarize, translate or add commentary."
)


def build_inventory_prompt(request: ExtractionRequest) -> str:
    user_prompt = request.prompt
    if not user_prompt:
        user_prompt = f"""
Generate {request.requested_qty} products for this brand.
Brand: {request.brand}
Category: {request.category}
Known Types: {request.known_types or "all"}
Description: {request.description}
""".strip()

    return f"Make a product list for this prompt and output exactly the table described:\n{user_prompt}"


def build_invoice_prompt(ocr_text: str) -> str:
    return INVOICE_PROMPT_TEMPLATE.format(ocr_text=ocr_text[:MAX_OCR_CHARS])


def build_classification_prompt(product_name: str, brand: str = "", category: str = "", unit: str = "") -> str:
    return f"""
Product Name: {product_name}
Brand: {brand}
Category: {category}
Unit: {unit}
""".strip()
