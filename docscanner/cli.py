"""
Document Scanner Terminal Client
================================

Command-line access to the scanner pipeline.

Usage:
    docscanner types
    docscanner frame --width 1080 --height 1920 --type 01
    docscanner --server-url https://ocr.example.com scan doc.jpg --type 02 --user u-1
    docscanner --config scanner.yaml capture
"""

import argparse
import logging
import sys

from docscanner.camera import OpenCVCamera
from docscanner.client import DocumentScanClient
from docscanner.config import load_config
from docscanner.errors import ScannerError
from docscanner.models import DocumentTypeRegistry, SaveOcrRequest, ScanDocumentResponse
from docscanner.paths import LocalResourceResolver
from docscanner.pipeline import CaptureCoordinator, CaptureListener, Cropper, FrameGeometryCalculator

LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def print_response(response: ScanDocumentResponse):
    print(f"✓ {response.response_code} {response.response_message or ''}".rstrip())
    for name, value in response.ocr_fields().items():
        if name == "ocr_masked_image":
            value = f"<{len(value)} chars>"
        print(f"  {name}: {value}")


class TerminalListener(CaptureListener):
    def on_state_changed(self, old_state, new_state):
        print(f"  [{old_state} -> {new_state}]")

    def on_image_captured(self, path, document_type):
        print(f"✓ Captured {document_type.name}: {path}")

    def on_error(self, error):
        print(f"✗ {error}")


# ----------------------------------------------------------------------
# COMMANDS
# ----------------------------------------------------------------------

def cmd_types(args):
    registry = _registry(args)
    for doc_type in registry:
        kind = "passport" if doc_type.is_passport_type else "card"
        print(f"{doc_type.id}  {doc_type.name} ({kind}, ratio {doc_type.aspect_ratio})")
    return True


def cmd_frame(args):
    registry = _registry(args)
    doc_type = registry.get(args.type) if args.type else registry.default
    frame = FrameGeometryCalculator().compute(args.width, args.height, doc_type)
    print(f"{doc_type.name}: x={frame.x:.1f} y={frame.y:.1f} "
          f"width={frame.width:.1f} height={frame.height:.1f}")
    if args.masks:
        for name, rect in frame.mask_regions(args.width, args.height).items():
            print(f"  mask {name}: x={rect.x:.1f} y={rect.y:.1f} "
                  f"width={rect.width:.1f} height={rect.height:.1f}")
    return True


def cmd_scan(args):
    config = _config(args)
    registry = config.build_registry()
    doc_type = registry.get(args.type)
    with _client(config) as client:
        response = client.scan(args.image, doc_type, config.user_id, config.country_code)
    print_response(response)
    return True


def cmd_save(args):
    config = _config(args)
    registry = config.build_registry()
    request = SaveOcrRequest(
        user_id=config.user_id,
        document_type_id=registry.get(args.type).id,
        country_code=config.country_code,
        ocr_number=args.number,
        ocr_birth_day=args.birth_day,
        ocr_name=args.name,
        ocr_expire_date=args.expire_date,
        ocr_address=args.address,
        ocr_reserved=args.reserved,
    )
    with _client(config) as client:
        response = client.save_ocr(request, args.image)
    print_response(response)
    return True


def cmd_capture(args):
    config = _config(args)
    with _client(config) as client:
        coordinator = CaptureCoordinator(
            camera=OpenCVCamera(index=config.camera_index),
            client=client,
            user_id=config.user_id,
            output_dir=config.output_dir,
            registry=config.build_registry(),
            viewport=config.viewport,
            crop=Cropper() if config.crop_enabled else None,
            listener=TerminalListener(),
            country_code=config.country_code,
            resolver=LocalResourceResolver(config.platform),
            delete_uploaded_images=config.delete_uploaded_images,
        )
        try:
            return _capture_loop(coordinator, args)
        except KeyboardInterrupt:
            print("\n\nInterrupted by user")
            return False
        finally:
            coordinator.shutdown()


def _capture_loop(coordinator, args):
    if not coordinator.request_permission():
        return False
    if args.type:
        coordinator.select_document_type(args.type)

    while True:
        input(f"Place the {coordinator.document_type.name} in front of the camera and press Enter...")
        try:
            image = coordinator.capture()
        except ScannerError:
            continue
        if image is None:
            continue

        choice = input("Upload this image? [Y/n/r=retake]: ").strip().lower()
        if choice == "r":
            coordinator.retake()
            continue
        if choice == "n":
            coordinator.reset()
            return False

        while True:
            try:
                response = coordinator.confirm_upload().result()
            except ScannerError:
                if input("Retry upload? [y/N]: ").strip().lower() == "y":
                    coordinator.retry_upload()
                    continue
                return False
            print_response(response)
            return True


# ----------------------------------------------------------------------
# HELPERS
# ----------------------------------------------------------------------

def _config(args):
    return load_config(
        args.config,
        server_url=args.server_url,
        user_id=getattr(args, "user", None),
        country_code=getattr(args, "country", None),
        timeout=args.timeout,
    )


def _registry(args):
    if args.config:
        return _config(args).build_registry()
    return DocumentTypeRegistry()


def _client(config):
    if not config.user_id:
        raise ScannerError("user_id is required (use --user or DOCSCANNER_USER_ID)", "CONFIG_INVALID")
    return DocumentScanClient(
        config.server_url,
        timeout=config.timeout,
        resolver=LocalResourceResolver(config.platform),
    )


def build_parser():
    parser = argparse.ArgumentParser(description="Identity document scanner")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--server-url", help="OCR server base URL")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--log-level", choices=LOG_LEVELS.keys(), default="warning",
                        help="Logging verbosity")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("types", help="List document types")
    p.set_defaults(func=cmd_types)

    p = sub.add_parser("frame", help="Compute the guide frame for a viewport")
    p.add_argument("--width", type=float, required=True)
    p.add_argument("--height", type=float, required=True)
    p.add_argument("--type", help="Document type id (default: first registered)")
    p.add_argument("--masks", action="store_true", help="Also print the overlay masks")
    p.set_defaults(func=cmd_frame)

    p = sub.add_parser("scan", help="Upload an image for OCR")
    p.add_argument("image")
    p.add_argument("--type", required=True, help="Document type id")
    p.add_argument("--user", help="Member id (mbUid)")
    p.add_argument("--country", help="Country code")
    p.set_defaults(func=cmd_scan)

    p = sub.add_parser("save", help="Save OCR values with the original image")
    p.add_argument("image")
    p.add_argument("--type", required=True, help="Document type id")
    p.add_argument("--user", help="Member id (mbUid)")
    p.add_argument("--country", help="Country code")
    p.add_argument("--number")
    p.add_argument("--birth-day", help="YYYYMMDD")
    p.add_argument("--name")
    p.add_argument("--expire-date")
    p.add_argument("--address")
    p.add_argument("--reserved")
    p.set_defaults(func=cmd_save)

    p = sub.add_parser("capture", help="Capture from the camera and upload")
    p.add_argument("--type", help="Document type id")
    p.add_argument("--user", help="Member id (mbUid)")
    p.add_argument("--country", help="Country code")
    p.set_defaults(func=cmd_capture)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=LOG_LEVELS[args.log_level],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        success = args.func(args)
    except ScannerError as e:
        print(f"✗ {e.message}")
        success = False
    except OSError as e:
        print(f"✗ {e}")
        success = False

    return 0 if success else 1


if __name__ == '__main__':
    sys.exit(main())
