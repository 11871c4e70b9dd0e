from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional

from ..errors import FatalError
from .command import run_cmd
from .files import backup_if_exists

logger = logging.getLogger(__name__)

_USER_RE = re.compile(r"^[a-z_][a-z0-9_-]*\$?$")
# Characters with meaning in a sudoers Cmnd_Spec (args, wildcards, aliases, escapes).
_UNSAFE_PATH_RE = re.compile(r"[\s,:=\\*?\[\]!()\"'#%]")


def render_grant(user: str, script_path: str) -> str:
    """One sudoers line letting user run exactly script_path as root, no password."""

    if not _USER_RE.match(user):
        raise FatalError(f"Refusing to write sudoers rule for invalid user name: {user!r}")
    if not script_path.startswith("/") or _UNSAFE_PATH_RE.search(script_path):
        raise FatalError(f"Refusing to write sudoers rule for unsafe script path: {script_path!r}")
    return f"{user} ALL=(root) NOPASSWD: {script_path}\n"


def install_policy(path: str, contents: str, *, visudo: str = "visudo") -> Optional[Path]:
    """Validate contents with visudo and atomically replace the live policy file.

    The candidate is staged in the same directory under a dotted name, which
    sudo's #includedir skips, so an invalid policy is never picked up. On
    validation failure the staging file is removed and the live file is left
    as it was. Returns the backup of the previous policy, if any.
    """

    live = Path(path)
    saved = backup_if_exists(live)

    live.parent.mkdir(parents=True, exist_ok=True)
    staging = live.with_name(f".{live.name}.staging")
    staging.write_text(contents, encoding="utf-8")
    os.chmod(staging, 0o440)

    r = run_cmd([visudo, "-cf", str(staging)], check=False)
    if r.returncode != 0:
        staging.unlink(missing_ok=True)
        logger.error("visudo rejected %s: %s", staging, (r.stdout + r.stderr).strip())
        raise FatalError(f"sudoers validation failed for {live}")

    os.replace(staging, live)
    logger.info("Installed sudoers policy %s", live)
    return saved
