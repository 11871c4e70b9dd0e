from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from ..errors import FatalError
from .command import run_cmd, run_with_progress
from .console import Console

logger = logging.getLogger(__name__)


def download_file(url: str, out: str, *, console: Console, label: Optional[str] = None) -> None:
    """Fetch url to out with curl, or wget when curl is missing."""

    msg = f"Downloading {label or Path(out).name}..."
    if shutil.which("curl"):
        argv = ["curl", "-fsSL", url, "-o", out]
    elif shutil.which("wget"):
        argv = ["wget", "-q", "-O", out, url]
    else:
        raise FatalError("Neither curl nor wget is installed.")

    run_with_progress(msg, argv, console=console)

    p = Path(out)
    if not p.is_file() or p.stat().st_size == 0:
        raise FatalError(f"Download failed or file is empty: {out}")
    logger.info("Downloaded %s (%d bytes)", out, p.stat().st_size)


def _default_route_iface() -> Optional[str]:
    r = run_cmd(["ip", "route", "show", "default", "0.0.0.0/0"], check=False)
    first = (r.stdout.splitlines() or [""])[0].split()
    if "dev" in first:
        i = first.index("dev")
        if i + 1 < len(first):
            return first[i + 1]
    return None


def _iface_ipv4(iface: str) -> Optional[str]:
    r = run_cmd(["ip", "-4", "addr", "show", "dev", iface], check=False)
    for line in r.stdout.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "inet":
            return parts[1].split("/")[0]
    return None


def _hostname_ipv4() -> Optional[str]:
    r = run_cmd(["hostname", "-I"], check=False)
    parts = r.stdout.split()
    return parts[0] if parts else None


def get_lab_ip() -> str:
    """Best-effort primary IPv4: default-route interface, then hostname -I, then ''."""

    try:
        iface = _default_route_iface()
        if iface:
            ip = _iface_ipv4(iface)
            if ip:
                return ip
    except Exception as e:
        logger.debug("Default-route lookup failed: %s", e)

    try:
        ip = _hostname_ipv4()
        if ip:
            return ip
    except Exception as e:
        logger.debug("hostname -I failed: %s", e)

    return ""
