"""
Identity document capture and upload.

Computes the guide frame for a document type, drives the capture -> crop ->
upload cycle and talks to the OCR server's scan / save endpoints.
"""

from docscanner.client import DocumentScanClient
from docscanner.config import ScannerConfig, load_config
from docscanner.models import (
    DocumentType,
    DocumentTypeRegistry,
    SaveOcrRequest,
    ScanDocumentResponse,
)
from docscanner.pipeline import (
    CapturedImage,
    CaptureCoordinator,
    CaptureListener,
    Cropper,
    FrameGeometryCalculator,
    FrameRect,
)

__version__ = "0.1.0"

__all__ = [
    "CapturedImage",
    "CaptureCoordinator",
    "CaptureListener",
    "Cropper",
    "DocumentScanClient",
    "DocumentType",
    "DocumentTypeRegistry",
    "FrameGeometryCalculator",
    "FrameRect",
    "SaveOcrRequest",
    "ScanDocumentResponse",
    "ScannerConfig",
    "load_config",
]
