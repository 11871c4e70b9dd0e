from __future__ import annotations

import logging
import os
import shutil
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def timestamp() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


def backup_if_exists(path: str | Path, *, stamp: Optional[str] = None) -> Optional[Path]:
    """Copy path aside as <path>.bak.<stamp>, preserving mode and times.

    Existing backups are never overwritten: a second backup within the same
    second gets a numeric suffix instead.
    """

    src = Path(path)
    if not src.exists():
        return None

    base = f"{src}.bak.{stamp or timestamp()}"
    dst = Path(base)
    n = 1
    while dst.exists():
        dst = Path(f"{base}.{n}")
        n += 1

    shutil.copy2(src, dst)
    logger.info("Backed up %s -> %s", src, dst)
    return dst


def write_file(
    path: str | Path,
    contents: str,
    *,
    mode: Optional[int] = None,
    backup: bool = True,
) -> Optional[Path]:
    """Overwrite path with contents, backing up the previous file first.

    The new contents are written next to the target and renamed into place,
    so readers never see a half-written file. Returns the backup path, if any.
    """

    p = Path(path)
    saved = backup_if_exists(p) if backup else None

    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(f".{p.name}.tmp")
    tmp.write_text(contents, encoding="utf-8", errors="surrogateescape")
    if mode is not None:
        os.chmod(tmp, mode)
    os.replace(tmp, p)
    logger.info("Wrote %s", p)
    return saved
