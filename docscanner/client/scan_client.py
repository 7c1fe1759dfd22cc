"""
Document Scan Client
Uploads captured document images to the OCR server and classifies the reply.

The server performs OCR; this client only sends multipart requests and maps
the JSON body. It never retries, caches or persists anything.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from docscanner.errors import NetworkError, ServerRejectedError
from docscanner.models import (
    DocumentType,
    SaveOcrRequest,
    ScanDocumentRequest,
    ScanDocumentResponse,
    map_scan_response,
)
from docscanner.paths import LocalResourceResolver

logger = logging.getLogger(__name__)

SCAN_PATH = "/ocr/scan"
SAVE_PATH = "/ocr/save"
DOCUMENT_FIELD = "document"


class DocumentScanClient:
    """
    Client for the OCR scan / save endpoints.

    Usage:
        with DocumentScanClient("https://ocr.example.com") as client:
            response = client.scan("/tmp/doc.jpg", doc_type, user_id="u-1")
    """

    def __init__(self, server_url: str, timeout: Optional[float] = None,
                 resolver: Optional[LocalResourceResolver] = None,
                 session: Optional[requests.Session] = None):
        """
        Args:
            server_url: Base URL of the OCR server.
            timeout: Request timeout in seconds. None waits indefinitely.
            resolver: Turns image locators into openable paths.
            session: Optional preconfigured requests session.
        """
        if not server_url:
            raise ValueError("server_url is required")
        self.server_url = server_url.rstrip('/')
        self.timeout = timeout
        self.resolver = resolver or LocalResourceResolver()
        self.session = session or requests.Session()
        logger.info(f"Document scan client initialized with base URL: {self.server_url}")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.session.close()

    def scan(self, image_path: Union[str, Path], document_type: DocumentType,
             user_id: str, country_code: Optional[str] = None) -> ScanDocumentResponse:
        """
        Send a document image for OCR.

        Returns:
            ScanDocumentResponse: the parsed body of a successful reply.

        Raises:
            NetworkError: transport failure or unreadable body.
            ServerRejectedError: the server answered with a non-success code.
        """
        request = ScanDocumentRequest(
            user_id=user_id,
            document_type_id=document_type.id,
            country_code=country_code,
        )
        return self._post(SCAN_PATH, request.form_fields(), image_path, document_type.id)

    def save_ocr(self, request: SaveOcrRequest,
                 image_path: Union[str, Path]) -> ScanDocumentResponse:
        """
        Persist OCR values together with the original image.

        Only OCR fields that are set are sent. Raises the same errors as scan().
        """
        return self._post(SAVE_PATH, request.form_fields(), image_path,
                          request.document_type_id)

    def _post(self, path: str, data: dict, image_path, document_type_id: str) -> ScanDocumentResponse:
        url = f"{self.server_url}{path}"
        file_path = self.resolver.to_filesystem_path(image_path)
        logger.info(f"Uploading {file_path.name} to {url} (ocrType={document_type_id})")

        with open(file_path, 'rb') as f:
            files = {DOCUMENT_FIELD: (f"document_{document_type_id}.jpg", f, 'image/jpeg')}
            try:
                response = self.session.post(url, data=data, files=files, timeout=self.timeout)
            except requests.RequestException as e:
                logger.error(f"Upload to {url} failed: {e}")
                raise NetworkError(str(e), url) from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Response from {url} is not JSON (HTTP {response.status_code})")
            raise NetworkError(f"invalid JSON body: {e}", url) from e

        try:
            result = map_scan_response(payload)
        except TypeError as e:
            logger.error(f"Unexpected response shape from {url}: {e}")
            raise NetworkError(str(e), url) from e

        if not result.is_success:
            logger.warning(f"Server rejected document: {result.response_code} {result.response_message}")
            raise ServerRejectedError(result.response_code, result.response_message)

        logger.info(f"Document accepted by server: {result.response_message}")
        return result
