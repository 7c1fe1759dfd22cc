"""
Pipeline package for the document scanner.

This package contains the components responsible for:
- Computing the on-screen guide frame for a document type (geometry)
- Cutting the guide-frame region out of a captured picture (crop)
- Event delivery to the host UI (events)
- Managing the capture -> crop -> upload cycle (controller)
"""

from .geometry import FrameGeometryCalculator, FrameRect
from .crop import Cropper
from .events import CaptureListener
from .controller import CapturedImage, CaptureCoordinator


__all__ = [
    "FrameGeometryCalculator",
    "FrameRect",
    "Cropper",
    "CaptureListener",
    "CapturedImage",
    "CaptureCoordinator",
]
