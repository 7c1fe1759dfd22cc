from docscanner.models import DocumentType, ScanDocumentResponse


class CaptureListener:
    """
    Receives the events of a capture cycle. The host UI subclasses this and
    overrides what it needs; every method defaults to doing nothing.

    Methods may be invoked from the upload worker thread.
    """

    def on_state_changed(self, old_state: str, new_state: str) -> None:
        pass

    def on_image_captured(self, path: str, document_type: DocumentType) -> None:
        pass

    def on_scan_complete(self, response: ScanDocumentResponse) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass

    def on_back(self) -> None:
        pass
