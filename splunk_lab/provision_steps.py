from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .config import ProvisionConfig
from .errors import FatalError, best_effort
from .lib.accounts import add_to_admin_group, ensure_login_user, set_password
from .lib.banners import render_postlogin, render_prelogin, render_profile_snippet
from .lib.command import run_cmd
from .lib.console import Console
from .lib.files import backup_if_exists, write_file
from .lib.sshd import reload_sshd, set_banner_directive
from .lib.sudoers import install_policy, render_grant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionCtx:
    cfg: ProvisionConfig
    console: Console


def step_10_ensure_user(*, ctx: ProvisionCtx) -> None:
    cfg = ctx.cfg
    ensure_login_user(cfg.lab_user)

    # Deliberately unconditional: every run resets the lab password to the known value.
    if cfg.set_password:
        set_password(cfg.lab_user, cfg.lab_pass)

    best_effort(lambda: add_to_admin_group(cfg.lab_user), what=f"add {cfg.lab_user} to admin group")


def step_20_deliver_script(*, ctx: ProvisionCtx) -> None:
    cfg = ctx.cfg
    if not Path(cfg.script_src).is_file():
        raise FatalError(
            f"Cannot find {cfg.script_src}. Place {cfg.script_name} next to this tool, "
            f"or set SPLUNK_SCRIPT_SRC=/path/to/{cfg.script_name}"
        )

    run_cmd(
        [
            "install",
            "-o",
            cfg.lab_user,
            "-g",
            cfg.lab_user,
            "-m",
            "755",
            cfg.script_src,
            cfg.script_dest,
        ]
    )
    logger.info("Delivered %s -> %s", cfg.script_src, cfg.script_dest)


def step_30_grant_sudo(*, ctx: ProvisionCtx) -> None:
    cfg = ctx.cfg
    line = render_grant(cfg.lab_user, cfg.script_dest)
    install_policy(cfg.sudoers_file, line)


def step_40_write_banners(*, ctx: ProvisionCtx) -> None:
    cfg = ctx.cfg
    write_file(cfg.issue_file, render_prelogin(cfg.lab_user, cfg.lab_pass, cfg.script_name))
    # Some distros regenerate /etc/motd, so the profile.d snippet repeats it for login shells.
    write_file(cfg.motd_file, render_postlogin(cfg.script_name))
    write_file(cfg.profile_banner, render_profile_snippet(cfg.script_name), mode=0o755)


def step_50_ssh_banner(*, ctx: ProvisionCtx) -> None:
    cfg = ctx.cfg
    if not cfg.configure_ssh_banner:
        logger.info("SSH banner disabled by configuration")
        return

    sshd_config = Path(cfg.sshd_config)
    if not sshd_config.is_file():
        logger.info("No %s; skipping SSH banner", sshd_config)
        return

    shutil.copy2(cfg.issue_file, cfg.issue_net)

    current = sshd_config.read_text(encoding="utf-8", errors="surrogateescape")
    updated = set_banner_directive(current, cfg.issue_net)
    backup_if_exists(sshd_config)
    if updated != current:
        write_file(sshd_config, updated, mode=sshd_config.stat().st_mode & 0o7777, backup=False)

    reload_sshd()


ALL_STEPS = [
    step_10_ensure_user,
    step_20_deliver_script,
    step_30_grant_sudo,
    step_40_write_banners,
    step_50_ssh_banner,
]
