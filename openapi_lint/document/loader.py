"""
Reads an OpenAPI description from disk.

JSON is tried first; if the text is not valid JSON it is decoded as YAML.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from ..errors import DocumentParseError
from .nodes import Document
from .parser import DocumentParser

logger = logging.getLogger(__name__)


def load_raw(path: Path) -> dict:
    """Decode a JSON or YAML file into a mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentParseError(f"{path} is not UTF-8 text: {e}") from e
    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        logger.debug(f"{path} is not JSON, decoding as YAML")
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentParseError(f"{path} is neither valid JSON nor valid YAML: {e}") from e
    return raw


def load_document(path: Path) -> Document:
    """
    Load and parse an OpenAPI description.

    Args:
        path: File containing the description, as JSON or YAML

    Returns:
        The parsed Document

    Raises:
        DocumentParseError: If the file cannot be decoded or is not an OpenAPI document
    """
    document = DocumentParser().parse(load_raw(path))
    logger.debug(f"Loaded {len(document.paths)} paths from {path}")
    return document
