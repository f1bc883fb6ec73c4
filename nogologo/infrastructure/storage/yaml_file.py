"""YAML file helpers shared by the file-backed stores"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ...domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def read_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping; a missing or empty file yields {}

    Raises:
        PersistenceError: the file exists but cannot be read or parsed
    """
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise PersistenceError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise PersistenceError(f"{path} does not contain a mapping")

    return data


def write_yaml(path: Path, data: Dict[str, Any], mode: Optional[int] = None) -> None:
    """Atomically replace a YAML file

    Args:
        path: Target file
        data: Mapping to dump
        mode: Optional permission bits applied before the file becomes visible

    Raises:
        PersistenceError: the file could not be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)
            if mode is not None:
                os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except (OSError, yaml.YAMLError) as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e

    logger.debug(f"Wrote {path}")
