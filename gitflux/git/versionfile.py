"""Persist the derived version for other build steps to pick up."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_version_file(version: str, path: str | Path) -> Path:
    """Write ``version`` to ``path`` (no trailing newline), creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(version, encoding="utf-8")
    logger.info("gitflux: wrote derived version to %s", out)
    return out


def read_version_file(path: str | Path) -> str | None:
    """Read a previously written version, or None if the file does not exist."""
    src = Path(path)
    if not src.exists():
        return None
    return src.read_text(encoding="utf-8").strip()
