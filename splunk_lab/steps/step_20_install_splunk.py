from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import OperatorDeclined, best_effort
from ..lib.accounts import ensure_service_account
from ..lib.command import run_with_progress
from ..lib.net import download_file
from ..lib.sysinfo import free_gb
from ..state_store import record_decision

logger = logging.getLogger(__name__)


def _confirm_disk_space(ctx) -> None:
    cfg = ctx.cfg
    check_path = cfg.splunk_home if Path(cfg.splunk_home).is_dir() else cfg.disk_check_fallback

    free = free_gb(check_path)
    if free is None:
        ctx.console.warn(f"Could not determine free disk space for {check_path}. Continuing.")
        return

    if free < cfg.min_free_gb:
        ctx.console.warn(f"Only {free} GB free on filesystem backing {check_path}.")
        ctx.console.warn("Splunk + ingested data may exceed this and cause 'no space left on device'.")
        if not ctx.console.ask_yes_no("Continue anyway? (y/N): "):
            raise OperatorDeclined(f"Operator declined to continue with {free} GB free")
        logger.info("Operator accepted low disk space (%s GB on %s)", free, check_path)


class InstallSplunkStep:
    step_id = "20_install_splunk"
    title = "Install (or reuse existing)"
    one_time = False

    def run(self, ctx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.cfg
        splunk = ctx.splunk

        if splunk.is_installed():
            ctx.console.ok(f"Splunk already installed at {cfg.splunk_home} (skipping install).")
            ensure_service_account(cfg.service_user, cfg.splunk_home)
            record_decision(state, "install", "reused")
            return state

        _confirm_disk_space(ctx)

        download_file(cfg.splunk_url, cfg.deb_path, console=ctx.console, label="Splunk package")
        run_with_progress("Installing package (dpkg)...", ["dpkg", "-i", cfg.deb_path], console=ctx.console)

        ctx.console.line("Deleting installer package to save space...")
        Path(cfg.deb_path).unlink(missing_ok=True)

        ensure_service_account(cfg.service_user, cfg.splunk_home)

        ctx.console.line(f"Seeding admin credentials (lab): {cfg.admin_user}/{cfg.admin_pass}")
        splunk.write_seed()

        # The seed stays in place if the first start fails, so the next start still consumes it.
        splunk.first_start()
        boot = best_effort(splunk.enable_boot_start, what="enable boot-start")
        best_effort(splunk.daemon_reload, what="systemctl daemon-reload", quiet=True)
        splunk.remove_seed()

        record_decision(state, "install", "fresh")
        record_decision(state, "boot_start", boot.value)
        ctx.console.ok("Splunk installed.")
        return state
