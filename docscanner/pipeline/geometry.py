from dataclasses import dataclass
from typing import Dict

from docscanner.models import DocumentType


FRAME_WIDTH_RATIO = 0.85  # leave a margin on both sides of the guide frame


@dataclass(frozen=True)
class FrameRect:
    """Guide frame in viewport coordinates."""
    x: float
    y: float
    width: float
    height: float

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    def mask_regions(self, viewport_width: float, viewport_height: float) -> Dict[str, "FrameRect"]:
        """
        The four dimmed rectangles drawn around the frame by the overlay.
        Top and bottom span the full width; left and right fill the band
        beside the frame.

        In landscape viewports the frame can be taller than the viewport;
        masks are clipped to the viewport, so their sizes never go negative.
        """
        band_top = min(max(0.0, self.y), viewport_height)
        band_bottom = max(band_top, min(viewport_height, self.y + self.height))
        band_height = band_bottom - band_top
        left_width = min(max(0.0, self.x), viewport_width)
        right_x = max(left_width, min(viewport_width, self.x + self.width))
        return {
            "top": FrameRect(0.0, 0.0, viewport_width, band_top),
            "left": FrameRect(0.0, band_top, left_width, band_height),
            "right": FrameRect(right_x, band_top, viewport_width - right_x, band_height),
            "bottom": FrameRect(0.0, band_bottom, viewport_width, viewport_height - band_bottom),
        }

    def scaled_to(self, image_width: int, image_height: int,
                  viewport_width: float, viewport_height: float) -> "FrameRect":
        """
        Map the frame from viewport coordinates into image pixels.

        The camera preview fills the viewport with one uniform scale and is
        centred ("cover"), so the mapped frame keeps its aspect ratio.
        """
        scale = max(image_width / viewport_width, image_height / viewport_height)
        offset_x = (viewport_width * scale - image_width) / 2
        offset_y = (viewport_height * scale - image_height) / 2
        return FrameRect(
            self.x * scale - offset_x,
            self.y * scale - offset_y,
            self.width * scale,
            self.height * scale,
        )


class FrameGeometryCalculator:
    """
    Computes the capture guide rectangle for a document type.

    The frame is 85% of the viewport width, its height follows the
    document's aspect ratio (1.4 passports, 1.6 cards) and it is centred.
    """

    def __init__(self, width_ratio: float = FRAME_WIDTH_RATIO):
        self.width_ratio = width_ratio

    def compute(self, viewport_width: float, viewport_height: float,
                document_type: DocumentType) -> FrameRect:
        if viewport_width <= 0 or viewport_height <= 0:
            raise ValueError(
                f"Viewport must have a positive size, got {viewport_width}x{viewport_height}"
            )

        width = viewport_width * self.width_ratio
        height = width / document_type.aspect_ratio
        x = (viewport_width - width) / 2
        y = (viewport_height - height) / 2
        return FrameRect(x=x, y=y, width=width, height=height)
