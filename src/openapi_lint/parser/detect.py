"""Load raw API documents and detect which OpenAPI dialect they use."""

import json
import logging
from pathlib import Path

import yaml

from openapi_lint.errors import DocumentLoadError

logger = logging.getLogger(__name__)


def load_raw(file_path: Path) -> dict:
    """Read a JSON or YAML file into a mapping.

    JSON is tried first; anything that is not valid JSON is handed to the
    YAML loader.
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        logger.debug("%s is not JSON, falling back to YAML", file_path)
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentLoadError(f"{file_path}: not valid JSON or YAML ({e})") from e

    if not isinstance(data, dict):
        raise DocumentLoadError(f"{file_path}: top level must be a mapping")
    return data


def detect_format(data: dict) -> str:
    """Detect the dialect of a loaded document.

    Returns: 'openapi3', 'swagger2', or 'unknown'.
    """
    version = data.get("openapi")
    if isinstance(version, str) and version.startswith("3."):
        return "openapi3"
    if "swagger" in data:
        return "swagger2"
    return "unknown"
