"""OpenCV camera wrapper used as the default capture action.

Desktop and kiosk builds have no permission dialog: access is granted when the
operating system lets us open the video device, so ``request_permission``
simply tries to open it. Mobile hosts provide their own camera object with the
same three methods (``request_permission``, ``capture``, ``shutdown``).
"""

import itertools
import time
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger


class OpenCVCamera:
    _counter = itertools.count()

    def __init__(self, index: int = 0, resolution: Optional[Tuple[int, int]] = None,
                 jpeg_quality: int = 95, warmup_frames: int = 5):
        self.index = index
        self.resolution = resolution
        self.jpeg_quality = jpeg_quality
        self.warmup_frames = warmup_frames
        self.cap: Optional[cv2.VideoCapture] = None

    # -------------------- Lifecycle --------------------

    def initialize(self):
        """Open the video device. Raises RuntimeError if it is unavailable."""
        if self.cap is not None and self.cap.isOpened():
            return

        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Camera {self.index} could not be opened")

        if self.resolution:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])

        # Let auto exposure settle
        for _ in range(self.warmup_frames):
            cap.read()

        self.cap = cap
        logger.info("Camera {} initialized", self.index)

    def shutdown(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Camera stopped")

    def request_permission(self) -> bool:
        try:
            self.initialize()
        except RuntimeError as e:
            logger.warning("Camera access refused: {}", e)
            return False
        return True

    # -------------------- Capture --------------------

    def capture_frame(self) -> np.ndarray:
        """Capture a BGR frame (NumPy array)."""
        if self.cap is None:
            raise RuntimeError("Camera not initialized")

        ok, frame = self.cap.read()
        if not ok or frame is None:
            raise RuntimeError("Camera returned empty frame")
        return frame

    def capture(self, output_dir: Path) -> Path:
        """Capture a full frame and save it as JPEG; returns the file path."""
        frame = self.capture_frame()

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        ts = int(time.time() * 1000)
        path = output_dir / f"capture_{ts}_{next(self._counter)}.jpg"

        params = [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality]
        if not cv2.imwrite(str(path), frame, params):
            raise RuntimeError(f"Failed to write capture to {path}")

        logger.info("Frame captured: {} ({}x{})", path, frame.shape[1], frame.shape[0])
        return path
