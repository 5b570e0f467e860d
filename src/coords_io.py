"""Reading and writing coordinate documents (``{"customCoordinates": [...]}``)."""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING

from pydantic import ValidationError

from domain.errors import ConfigurationError
from domain.models import CoordinateDocument
from shared.constants import COORDINATES_KEY

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def read_document(path: Path) -> CoordinateDocument:
    """
    Load and validate a coordinate document.

    Unknown fields, on the document and on each coordinate, are kept so the
    output mirrors the input.

    Raises:
        ConfigurationError: unreadable file, invalid JSON, or no coordinates.
    """
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        msg = f'Could not read the input file {path}: {e}'
        raise ConfigurationError(msg) from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Could not read the input file, please make sure it's valid JSON format ({e})"
        raise ConfigurationError(msg) from e
    if not isinstance(data, dict) or not data.get(COORDINATES_KEY):
        msg = 'File does not contain any valid locations'
        raise ConfigurationError(msg)
    try:
        doc = CoordinateDocument.model_validate(data)
    except ValidationError as e:
        msg = f'Invalid location in {path}: {e}'
        raise ConfigurationError(msg) from e
    logger.info('Loaded %d locations from %s', len(doc.custom_coordinates), path)
    return doc


def write_document(doc: CoordinateDocument, path: Path) -> None:
    """Write ``doc`` as compact JSON and fsync it."""
    payload = json.dumps(doc.to_json_dict(), ensure_ascii=False, separators=(',', ':'))
    with path.open('w', encoding='utf-8') as f:
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())
    logger.info('Output saved to %s', path)
