from __future__ import annotations

import logging
import re
import shutil

from ..errors import Outcome, best_effort
from .command import run_cmd

logger = logging.getLogger(__name__)

_ACTIVE_RE = re.compile(r"^\s*Banner\s+", re.IGNORECASE)
_COMMENTED_RE = re.compile(r"^\s*#\s*Banner\s+", re.IGNORECASE)
_MATCH_RE = re.compile(r"^\s*Match\s+", re.IGNORECASE)


def set_banner_directive(text: str, banner_path: str) -> str:
    """Return sshd_config text with exactly one global `Banner banner_path`.

    Only the global section (before the first Match block) is considered.
    The first active directive is rewritten in place; failing that, the first
    commented one is uncommented; failing that, a new line is added at the
    end of the global section. Further active directives are commented out.
    """

    lines = text.splitlines()
    directive = f"Banner {banner_path}"
    global_end = next((i for i, ln in enumerate(lines) if _MATCH_RE.match(ln)), len(lines))

    active = [i for i in range(global_end) if _ACTIVE_RE.match(lines[i])]
    commented = [i for i in range(global_end) if _COMMENTED_RE.match(lines[i])]
    target = active[0] if active else (commented[0] if commented else None)

    out = []
    for i, ln in enumerate(lines):
        if i == target:
            out.append(directive)
        elif i in active:
            out.append("#" + ln.lstrip())
        else:
            out.append(ln)

    if target is None:
        if global_end == len(out):
            out.extend(["", directive])
        else:
            out[global_end:global_end] = [directive, ""]

    return "\n".join(out) + "\n"


def _reload() -> None:
    if shutil.which("systemctl"):
        candidates = [["systemctl", "reload", "sshd"], ["systemctl", "reload", "ssh"]]
    else:
        candidates = [["service", "sshd", "reload"], ["service", "ssh", "reload"]]
    for argv in candidates:
        if run_cmd(argv, check=False).returncode == 0:
            return
    raise RuntimeError("no ssh service accepted a reload")


def reload_sshd() -> Outcome:
    """Ask sshd to re-read its config; existing sessions are unaffected."""

    return best_effort(_reload, what="reload sshd")
