"""
Error Handling System
Provides consistent error types across the capture, crop and upload layers
"""


class ScannerError(Exception):
    """Base exception for document scanner errors"""
    def __init__(self, message, error_code, details=None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        """Convert error to JSON-serializable dict"""
        return {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details
        }


class ConfigError(ScannerError):
    """Invalid or incomplete configuration"""
    def __init__(self, message, details=None):
        super().__init__(message=message, error_code="CONFIG_INVALID", details=details)


class UnknownDocumentTypeError(ScannerError):
    """Document type id not present in the registry"""
    def __init__(self, document_type_id):
        super().__init__(
            message=f"Unknown document type: {document_type_id}",
            error_code="UNKNOWN_DOCUMENT_TYPE",
            details={"document_type_id": document_type_id}
        )


# Camera layer
class PermissionDeniedError(ScannerError):
    """Camera permission was not granted"""
    def __init__(self, reason=None):
        super().__init__(
            message="Camera permission is required",
            error_code="PERMISSION_DENIED",
            details={
                "reason": reason,
                "suggestion": "Grant camera access and request permission again"
            }
        )


class CaptureFailedError(ScannerError):
    """Camera device or driver failed to deliver a picture"""
    def __init__(self, reason=None):
        super().__init__(
            message="Failed to capture image",
            error_code="CAPTURE_FAILED",
            details={
                "reason": reason,
                "suggestion": "Check the camera connection and try again"
            }
        )


# Crop layer
class CropCancelled(ScannerError):
    """The user abandoned the crop step. Not surfaced as an error."""
    def __init__(self):
        super().__init__(message="Crop cancelled by user", error_code="CROP_CANCELLED")


class CropFailedError(ScannerError):
    """Crop step could not produce an image"""
    def __init__(self, image_path, reason=None):
        super().__init__(
            message="Failed to crop captured image",
            error_code="CROP_FAILED",
            details={"image_path": str(image_path), "reason": reason}
        )


# Upload layer
class NetworkError(ScannerError):
    """Transport-level failure: connection, timeout or unreadable body"""
    def __init__(self, reason=None, url=None):
        super().__init__(
            message="A network error occurred",
            error_code="NETWORK_ERROR",
            details={"reason": reason, "url": url}
        )


class ServerRejectedError(ScannerError):
    """The server answered with a response code other than success"""
    def __init__(self, code, message):
        self.code = code
        super().__init__(
            message=message or "The server rejected the document",
            error_code="SERVER_REJECTED",
            details={"code": code}
        )


# Coordinator state errors
class InvalidStateError(ScannerError):
    """An operation was requested from a state that does not allow it"""
    def __init__(self, operation, state):
        super().__init__(
            message=f"Cannot {operation} while {state}",
            error_code="INVALID_STATE",
            details={"operation": operation, "state": state}
        )


class DocumentTypeLockedError(InvalidStateError):
    """Document type cannot change while a capture or crop is running"""
    def __init__(self, state):
        super().__init__("change document type", state)
        self.error_code = "DOCUMENT_TYPE_LOCKED"


class UploadInProgressError(InvalidStateError):
    """An upload for this capture cycle is already in flight"""
    def __init__(self):
        super().__init__("upload", "uploading")
        self.error_code = "UPLOAD_IN_PROGRESS"
