"""
Scanner configuration.

Values come from an optional YAML file and are overridden by DOCSCANNER_*
environment variables, e.g. DOCSCANNER_SERVER_URL=https://ocr.example.com
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from docscanner.errors import ConfigError
from docscanner.models import DocumentTypeRegistry

ENV_PREFIX = "DOCSCANNER_"


@dataclass
class ScannerConfig:
    server_url: str
    user_id: Optional[str] = None
    country_code: Optional[str] = None
    timeout: Optional[float] = None
    output_dir: Path = Path("captures")
    platform: str = "default"
    crop_enabled: bool = True
    delete_uploaded_images: bool = True
    camera_index: int = 0
    viewport: Tuple[int, int] = (1080, 1920)
    document_types: List[dict] = field(default_factory=list)

    def build_registry(self) -> DocumentTypeRegistry:
        if self.document_types:
            return DocumentTypeRegistry.from_config(self.document_types)
        return DocumentTypeRegistry()


def _env_overrides(environ) -> dict:
    overrides = {}
    for name in ("server_url", "user_id", "country_code", "platform"):
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            overrides[name] = value

    timeout = environ.get(f"{ENV_PREFIX}TIMEOUT")
    if timeout:
        try:
            overrides["timeout"] = float(timeout)
        except ValueError:
            raise ConfigError(f"{ENV_PREFIX}TIMEOUT must be a number, got '{timeout}'")

    output_dir = environ.get(f"{ENV_PREFIX}OUTPUT_DIR")
    if output_dir:
        overrides["output_dir"] = output_dir
    return overrides


def load_config(path=None, environ=None, **overrides) -> ScannerConfig:
    """
    Build a ScannerConfig.

    :param path: Optional YAML file.
    :param environ: Mapping used for environment overrides (defaults to os.environ).
    :param overrides: Explicit values (e.g. from the command line); None is ignored.
    """
    values = {}
    if path is not None:
        with open(path, "r") as f:
            values = yaml.safe_load(f) or {}
        if not isinstance(values, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

    values.update(_env_overrides(os.environ if environ is None else environ))
    values.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(ScannerConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}", {"keys": unknown})

    if not values.get("server_url"):
        raise ConfigError("server_url is required")

    values["output_dir"] = Path(values.get("output_dir", "captures"))
    if "viewport" in values:
        values["viewport"] = tuple(values["viewport"])
    return ScannerConfig(**values)
