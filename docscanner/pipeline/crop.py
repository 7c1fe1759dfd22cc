from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from docscanner.errors import CropFailedError
from docscanner.pipeline.geometry import FrameRect


class Cropper:
    """
    Default crop step: cuts the guide-frame region out of a full captured
    picture and writes it next to the original.

    Any callable with the signature of ``__call__`` can replace it, e.g. an
    interactive cropper that raises CropCancelled when the user backs out.
    """

    def __init__(self, resize_to_frame: bool = True, suffix: str = "_cropped"):
        self.resize_to_frame = resize_to_frame
        self.suffix = suffix

    def __call__(self, image_path: Path, frame: FrameRect,
                 viewport_size: Tuple[float, float]) -> Path:
        return self.crop_file(image_path, frame, viewport_size)

    def crop(self, image: np.ndarray, region: FrameRect) -> Optional[np.ndarray]:
        """
        Crop the image to a region given in image pixels.
        Returns None if the region does not overlap the image.
        """
        if image is None or image.size == 0:
            return None

        if not region.is_valid():
            return None

        h, w = image.shape[:2]

        x1 = max(0, int(round(region.x)))
        y1 = max(0, int(round(region.y)))
        x2 = min(w, int(round(region.x + region.width)))
        y2 = min(h, int(round(region.y + region.height)))

        if x1 >= x2 or y1 >= y2:
            return None

        return image[y1:y2, x1:x2]

    def crop_file(self, image_path: Path, frame: FrameRect,
                  viewport_size: Tuple[float, float],
                  output_path: Optional[Path] = None) -> Path:
        """Crop a picture on disk to the guide frame and save the result."""
        image_path = Path(image_path)
        image = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
        if image is None:
            raise CropFailedError(image_path, "image could not be read")

        h, w = image.shape[:2]
        region = frame.scaled_to(w, h, *viewport_size)
        cropped = self.crop(image, region)
        if cropped is None:
            raise CropFailedError(image_path, f"frame {region} outside image {w}x{h}")

        if self.resize_to_frame:
            # Match the frame width; height follows the cut so nothing is stretched
            ch, cw = cropped.shape[:2]
            width = int(round(frame.width))
            target = (width, max(1, int(round(width * ch / cw))))
            cropped = cv2.resize(cropped, target, interpolation=cv2.INTER_AREA)

        out = output_path or image_path.with_name(f"{image_path.stem}{self.suffix}.jpg")
        if not cv2.imwrite(str(out), cropped):
            raise CropFailedError(image_path, f"could not write {out}")

        logger.info("Cropped {} -> {} ({}x{})", image_path, out,
                    cropped.shape[1], cropped.shape[0])
        return out
