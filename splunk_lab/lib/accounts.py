from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

ADMIN_GROUPS = ("sudo", "wheel")


def user_exists(user: str) -> bool:
    return run_cmd(["id", "-u", user], check=False).returncode == 0


def group_exists(group: str) -> bool:
    return run_cmd(["getent", "group", group], check=False).returncode == 0


def ensure_service_account(user: str, home: str) -> None:
    """Create a system account for the platform and hand it the install dir."""

    if not user_exists(user):
        run_cmd(["useradd", "--system", "--home", home, "--shell", "/usr/sbin/nologin", user])
        logger.info("Created service account %s", user)

    if Path(home).is_dir():
        run_cmd(["chown", "-R", f"{user}:{user}", home])


def ensure_login_user(user: str) -> bool:
    """Create an interactive login user. Returns True if it was created."""

    if user_exists(user):
        logger.info("User %s already exists", user)
        return False
    run_cmd(["useradd", "-m", "-s", "/bin/bash", user])
    logger.info("Created user %s", user)
    return True


def set_password(user: str, password: str) -> None:
    run_cmd(["chpasswd"], input_text=f"{user}:{password}\n")
    logger.info("Password set for %s", user)


def add_to_admin_group(user: str, groups: Sequence[str] = ADMIN_GROUPS) -> Optional[str]:
    """Add user to the first admin group present on this host."""

    for group in groups:
        if group_exists(group):
            run_cmd(["usermod", "-aG", group, user])
            logger.info("Added %s to group %s", user, group)
            return group
    logger.info("No admin group (%s) on this host", ", ".join(groups))
    return None
