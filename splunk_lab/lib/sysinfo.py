from __future__ import annotations

import logging
import os
import platform
import shutil
from typing import Iterable, Optional

from ..errors import FatalError

logger = logging.getLogger(__name__)

_ARM = {"aarch64", "arm64", "armv7l", "armv6l"}


def normalize_arch(machine: str) -> str:
    m = machine.lower()
    return {
        "x86_64": "amd64",
        "amd64": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "armhf",
        "armv6l": "armhf",
    }.get(m, m)


def check_arch(allowed: Iterable[str], machine: Optional[str] = None) -> str:
    """Return the host machine string, or raise FatalError if not allowed."""

    m = machine if machine is not None else platform.machine()
    if m in set(allowed):
        logger.info("Architecture %s (%s) allowed", m, normalize_arch(m))
        return m
    if m.lower() in _ARM:
        raise FatalError(f"ARM detected ({m}). This lab will not function on ARM systems.")
    raise FatalError(f"Unsupported architecture: {m}")


def require_root(what: str) -> None:
    if os.geteuid() != 0:
        raise FatalError(f"Run as root. Example: sudo {what}")


def free_gb(path: str) -> Optional[int]:
    """Free space in whole GiB on the filesystem backing path, None if unknown."""

    try:
        usage = shutil.disk_usage(path)
    except OSError as e:
        logger.warning("Could not stat %s for free space: %s", path, e)
        return None
    return usage.free // (1024 ** 3)
