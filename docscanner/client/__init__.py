from .scan_client import SAVE_PATH, SCAN_PATH, DocumentScanClient

__all__ = ["DocumentScanClient", "SCAN_PATH", "SAVE_PATH"]
