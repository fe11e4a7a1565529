from .handlers import HandlerResponse, generate_hsn_and_gst, generate_inventory_by_brand, parse_invoice_file

__all__ = ["HandlerResponse", "generate_hsn_and_gst", "generate_inventory_by_brand", "parse_invoice_file"]
