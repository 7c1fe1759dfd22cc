import logging
import threading
from concurrent import futures
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from docscanner.client import DocumentScanClient
from docscanner.errors import (
    CaptureFailedError,
    CropCancelled,
    CropFailedError,
    DocumentTypeLockedError,
    InvalidStateError,
    PermissionDeniedError,
    ScannerError,
    UploadInProgressError,
)
from docscanner.fsm import CaptureFSM
from docscanner.models import DocumentType, DocumentTypeRegistry, ScanDocumentResponse
from docscanner.paths import LocalResourceResolver
from docscanner.pipeline.events import CaptureListener
from docscanner.pipeline.geometry import FrameGeometryCalculator, FrameRect

CropAction = Callable[[Path, FrameRect, Tuple[float, float]], Path]


@dataclass(frozen=True)
class CapturedImage:
    path: Path
    document_type: DocumentType


class CaptureCoordinator:
    """
    Orchestrates one document capture cycle:
    - Controls FSM
    - Asks the camera for permission and a picture
    - Crops the picture to the guide frame
    - Uploads it through DocumentScanClient on a worker thread
    - Reports every step to a CaptureListener
    """

    def __init__(
        self,
        camera,
        client: DocumentScanClient,
        user_id: str,
        output_dir: str,
        registry: Optional[DocumentTypeRegistry] = None,
        viewport: Tuple[float, float] = (1080, 1920),
        crop: Optional[CropAction] = None,
        listener: Optional[CaptureListener] = None,
        country_code: Optional[str] = None,
        resolver: Optional[LocalResourceResolver] = None,
        executor: Optional[futures.Executor] = None,
        delete_uploaded_images: bool = True,
    ):
        self.log = logging.getLogger("CaptureCoordinator")

        if not user_id:
            raise ValueError("user_id is required for scanning")

        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Configuration
        self.user_id = user_id
        self.country_code = country_code
        self.delete_uploaded_images = delete_uploaded_images

        # --- Core components ---
        self.camera = camera
        self.client = client
        self.crop = crop
        self.registry = registry or DocumentTypeRegistry()
        self.geometry = FrameGeometryCalculator()
        self.listener = listener or CaptureListener()
        self.resolver = resolver or LocalResourceResolver()
        self._executor = executor
        self._owns_executor = executor is None

        # --- Cycle state ---
        self._lock = threading.RLock()
        self.document_type = self.registry.default
        self.viewport = viewport
        self.frame_rect = self.geometry.compute(*viewport, self.document_type)
        self.captured: Optional[CapturedImage] = None
        self.last_response: Optional[ScanDocumentResponse] = None
        self.last_error: Optional[Exception] = None
        self._raw_path: Optional[Path] = None
        self._upload_future: Optional[futures.Future] = None

        # --- FSM ---
        self.fsm = CaptureFSM(callbacks=self._fsm_callbacks(), crop_enabled=crop is not None)

    # ----------------------------------------------------------------------
    # FSM CALLBACKS
    # ----------------------------------------------------------------------

    def _fsm_callbacks(self):
        return {
            "on_enter_ready": self._on_enter_ready,
            "on_enter_capturing": self._on_enter_capturing,
            "on_enter_cropping": self._on_enter_cropping,
            "on_enter_captured": self._on_enter_captured,
            "on_enter_uploading": self._on_enter_uploading,
            "on_enter_done": self._on_enter_done,
            "on_enter_failed": self._on_enter_failed,
            "on_state_change": self._on_state_change,
        }

    def _on_state_change(self, old, new):
        self.listener.on_state_changed(old, new)

    # ----------------------------------------------------------------------
    # ENGINE CALLS FOR EACH STATE
    # ----------------------------------------------------------------------

    def _on_enter_ready(self):
        # Whatever image the previous cycle left behind must not be reused
        self._discard_images()
        self.log.info("Ready to capture %s", self.document_type.name)

    def _on_enter_capturing(self):
        self.log.info("Capturing %s...", self.document_type.name)
        self.last_error = None

        try:
            self._raw_path = Path(self.camera.capture(self.output_dir))
        except Exception as e:
            self.log.error(f"Camera capture failed: {e}")
            self._report(CaptureFailedError(str(e)))
            self.fsm.capture_failed()
            return

        self.fsm.capture_done()

    def _on_enter_cropping(self):
        self.log.info("Cropping to frame %s", self.frame_rect)

        try:
            cropped = Path(self.crop(self._raw_path, self.frame_rect, self.viewport))
        except CropCancelled:
            self.log.info("Crop cancelled by user")
            self.fsm.crop_cancelled()
            return
        except CropFailedError as e:
            self.log.error(f"Crop failed: {e.details}")
            self._report(e)
            self.fsm.crop_failed()
            return
        except Exception as e:
            self.log.error(f"Crop failed: {e}")
            self._report(CropFailedError(self._raw_path, str(e)))
            self.fsm.crop_failed()
            return

        if cropped != self._raw_path:
            self._remove(self._raw_path)
        self._raw_path = cropped
        self.fsm.crop_done()

    def _on_enter_captured(self):
        if self.captured is None:
            self.captured = CapturedImage(self._raw_path, self.document_type)
            self._raw_path = None
            self.log.info("Image captured: %s", self.captured.path)
            self.listener.on_image_captured(
                self.resolver.to_locator(self.captured.path),
                self.captured.document_type,
            )

    def _on_enter_uploading(self):
        image = self.captured
        self.log.info("Uploading %s as %s", image.path, image.document_type.id)
        self.last_error = None

        try:
            self._upload_future = self._get_executor().submit(self._upload, image)
        except Exception as e:
            self.log.error(f"Could not start upload: {e}")
            self.last_error = e
            self._upload_future = futures.Future()
            self._upload_future.set_exception(e)
            self.fsm.upload_failed()

    def _on_enter_done(self):
        self.log.info("Scan complete: %s", self.last_response.response_message)
        if self.delete_uploaded_images:
            self._remove(self.captured.path)
        self.captured = None
        self.listener.on_scan_complete(self.last_response)

    def _on_enter_failed(self):
        self.log.error("Upload failed, image kept for retry: %s", self.last_error)
        self.listener.on_error(self.last_error)

    def _upload(self, image: CapturedImage) -> ScanDocumentResponse:
        """Runs on the worker thread."""
        try:
            response = self.client.scan(
                self.resolver.to_locator(image.path),
                image.document_type,
                self.user_id,
                self.country_code,
            )
        except Exception as e:
            if not isinstance(e, ScannerError):
                self.log.error("Unexpected upload error", exc_info=True)
            with self._lock:
                self.last_error = e
                self.fsm.upload_failed()
            raise

        with self._lock:
            self.last_response = response
            self.fsm.upload_succeeded()
        return response

    # ----------------------------------------------------------------------
    # HELPERS
    # ----------------------------------------------------------------------

    def _report(self, error: Exception):
        self.last_error = error
        self.listener.on_error(error)

    def _get_executor(self) -> futures.Executor:
        if self._executor is None:
            self._executor = futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="docscanner-upload")
        return self._executor

    def _remove(self, path: Optional[Path]):
        if path is None:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            self.log.warning(f"Could not delete {path}: {e}")

    def _discard_images(self):
        if self.captured is not None:
            self.log.info("Discarding %s", self.captured.path)
            self._remove(self.captured.path)
            self.captured = None
        self._remove(self._raw_path)
        self._raw_path = None

    def _require_state(self, operation, *states):
        if not self.fsm.in_state(*states):
            raise InvalidStateError(operation, self.fsm.state)

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------

    @property
    def state(self) -> str:
        return self.fsm.state

    def request_permission(self) -> bool:
        """Ask the camera for access. Returns True once the coordinator is ready."""
        with self._lock:
            if not self.fsm.in_state("awaiting_permission"):
                return True

            try:
                granted = bool(self.camera.request_permission())
            except Exception as e:
                self.log.error(f"Permission request failed: {e}")
                self._report(PermissionDeniedError(str(e)))
                return False

            if not granted:
                self.log.warning("Camera permission denied")
                self._report(PermissionDeniedError())
                return False

            self.fsm.permission_granted()
            return True

    def select_document_type(self, document_type: Union[str, DocumentType]) -> FrameRect:
        """Switch document type and recompute the guide frame."""
        with self._lock:
            if self.fsm.in_state("capturing", "cropping"):
                raise DocumentTypeLockedError(self.fsm.state)

            self.document_type = self.registry.resolve(document_type)
            self.frame_rect = self.geometry.compute(*self.viewport, self.document_type)
            self.log.info("Document type set to %s (%s)", self.document_type.id, self.document_type.name)
            return self.frame_rect

    def set_viewport(self, width: float, height: float) -> FrameRect:
        """Recompute the guide frame after a resize or rotation."""
        with self._lock:
            if self.fsm.in_state("capturing", "cropping"):
                raise InvalidStateError("resize viewport", self.fsm.state)

            self.frame_rect = self.geometry.compute(width, height, self.document_type)
            self.viewport = (width, height)
            return self.frame_rect

    def capture(self) -> Optional[CapturedImage]:
        """
        Take a picture and run the crop step.

        Returns the CapturedImage, or None if the user cancelled the crop.
        Raises CaptureFailedError / CropFailedError after returning to ready.
        """
        with self._lock:
            self._require_state("capture", "ready")
            self.fsm.start_capture()

            if self.fsm.in_state("captured"):
                return self.captured
            if isinstance(self.last_error, (CaptureFailedError, CropFailedError)):
                raise self.last_error
            return None

    def retake(self):
        """Drop the captured image and go back to ready."""
        with self._lock:
            self._require_state("retake", "captured")
            self.fsm.retake()

    def confirm_upload(self) -> futures.Future:
        """
        Start uploading the captured image.

        Returns a Future resolving to the ScanDocumentResponse, or raising
        NetworkError / ServerRejectedError. Only one upload may be in flight.
        """
        with self._lock:
            if self.fsm.in_state("uploading"):
                self.log.warning("Upload already in progress, request rejected")
                raise UploadInProgressError()
            self._require_state("upload", "captured")
            self.fsm.start_upload()
            return self._upload_future

    def retry_upload(self):
        """After a failed upload, return to captured so the image can be sent again."""
        with self._lock:
            self._require_state("retry upload", "failed")
            self.fsm.retry_upload()

    def reset(self):
        """Abandon the current cycle and start a new one from ready."""
        with self._lock:
            self._require_state("reset", "captured", "done", "failed")
            self.fsm.reset_cycle()

    def back(self):
        self.listener.on_back()

    def shutdown(self, wait: bool = True):
        """Release the camera and the upload worker."""
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait)
            self._executor = None
        shutdown = getattr(self.camera, "shutdown", None)
        if shutdown is not None:
            shutdown()
