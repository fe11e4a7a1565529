from .image import bytes_to_data_url, download_file, guess_mime_type
from .ocr import OcrService, VisionOcr

__all__ = ["OcrService", "VisionOcr", "bytes_to_data_url", "download_file", "guess_mime_type"]
