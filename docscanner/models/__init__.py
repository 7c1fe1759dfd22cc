"""
Data models for the document scanner: the document-type table and the
request / response shapes exchanged with the OCR server.
"""

from .document_types import (
    CARD_ASPECT_RATIO,
    DEFAULT_DOCUMENT_TYPES,
    PASSPORT_ASPECT_RATIO,
    DocumentType,
    DocumentTypeRegistry,
)
from .scan import (
    SUCCESS_CODE,
    SaveOcrRequest,
    ScanDocumentRequest,
    ScanDocumentResponse,
    map_scan_response,
)

__all__ = [
    "CARD_ASPECT_RATIO",
    "DEFAULT_DOCUMENT_TYPES",
    "PASSPORT_ASPECT_RATIO",
    "DocumentType",
    "DocumentTypeRegistry",
    "SUCCESS_CODE",
    "SaveOcrRequest",
    "ScanDocumentRequest",
    "ScanDocumentResponse",
    "map_scan_response",
]
