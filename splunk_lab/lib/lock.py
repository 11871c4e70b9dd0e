from __future__ import annotations

import fcntl
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..errors import FatalError

logger = logging.getLogger(__name__)


@contextmanager
def exclusive_lock(path: str) -> Iterator[None]:
    """Hold a non-blocking exclusive flock on path for the duration of the block."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(p, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            raise FatalError(f"Another run is already in progress (lock held: {p})") from None
        logger.debug("Acquired lock %s", p)
        try:
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)
