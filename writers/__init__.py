from .excel_writer import inventory_to_frame, write_inventory_xlsx

__all__ = ["inventory_to_frame", "write_inventory_xlsx"]
