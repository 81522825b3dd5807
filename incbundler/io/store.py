"""Persisted cache store serialisation.

The store is a JSON object mapping relative paths to module records. JSON
objects keep their key order through ``json`` and ``dict``, which is what
makes bundle order reproducible across processes.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Union

from pydantic import ValidationError as PydanticValidationError

from incbundler.exceptions import SerializationError
from incbundler.model import ModuleRecord

logger = logging.getLogger(__name__)

StoreMap = Dict[str, ModuleRecord]


def load_map(path: Union[str, Path]) -> StoreMap:
    """
    Load a store file.

    Args:
        path: Location of the store document

    Returns:
        Ordered mapping of relative path to record. Empty when the file
        does not exist.

    Raises:
        SerializationError: If the file exists but is not a valid store
        OSError: If the file cannot be read
    """
    path = Path(path)
    if not path.is_file():
        return {}

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(path, str(e)) from e

    if not isinstance(data, dict):
        raise SerializationError(path, "top-level value must be an object")

    records: StoreMap = {}
    for key, value in data.items():
        try:
            records[key] = ModuleRecord.model_validate(value)
        except PydanticValidationError as e:
            raise SerializationError(path, f"invalid record '{key}': {e}") from e

    logger.debug(f"Loaded {len(records)} records from {path}")
    return records


def save_map(path: Union[str, Path], records: StoreMap) -> None:
    """
    Write the full store, replacing the previous file atomically.

    The document is written to a temporary file in the same directory and
    moved into place, so readers never observe a half-written store.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        key: record.model_dump(mode="json", exclude_none=True)
        for key, record in records.items()
    }

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.debug(f"Saved {len(records)} records to {path}")
