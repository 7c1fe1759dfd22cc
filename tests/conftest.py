"""
Pytest configuration and fixtures for the document scanner tests.
"""
from pathlib import Path
from unittest.mock import MagicMock

import cv2
import numpy as np
import pytest

from docscanner.client import DocumentScanClient
from docscanner.models import DocumentTypeRegistry, ScanDocumentResponse


class FakeCamera:
    """Camera double that writes a small JPEG for every capture."""

    def __init__(self, granted=True, fail=False, size=(400, 300)):
        self.granted = granted
        self.fail = fail
        self.size = size
        self.captures = []
        self.shutdown_called = False

    def request_permission(self):
        return self.granted

    def capture(self, output_dir):
        if self.fail:
            raise RuntimeError("sensor timeout")
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"capture_{len(self.captures)}.jpg"
        w, h = self.size
        image = np.full((h, w, 3), 200, dtype=np.uint8)
        cv2.imwrite(str(path), image)
        self.captures.append(path)
        return path

    def shutdown(self):
        self.shutdown_called = True


@pytest.fixture
def registry():
    return DocumentTypeRegistry()


@pytest.fixture
def fake_camera():
    return FakeCamera()


@pytest.fixture
def success_response():
    return ScanDocumentResponse(
        response_code="0000",
        response_message="OK",
        ocr_name="HONG GILDONG",
    )


@pytest.fixture
def mock_client(success_response):
    client = MagicMock(spec=DocumentScanClient)
    client.scan.return_value = success_response
    return client


@pytest.fixture
def sample_image(tmp_path):
    """A 400x300 JPEG with a dark square in the middle."""
    image = np.full((300, 400, 3), 255, dtype=np.uint8)
    image[100:200, 150:250] = 0
    path = tmp_path / "sample.jpg"
    cv2.imwrite(str(path), image)
    return path
