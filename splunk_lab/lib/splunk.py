from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from ..config import InstallerConfig
from .command import CmdResult, as_user, run_cmd, run_with_progress
from .console import Console

logger = logging.getLogger(__name__)


class SplunkCtl:
    """Splunk CLI wrapper.

    Every start/status/ingest call goes through su to the service account;
    only boot-start enablement (which writes a systemd unit) runs as root.
    """

    def __init__(self, cfg: InstallerConfig, console: Console) -> None:
        self.cfg = cfg
        self.console = console

    def _as_service(self, args: Sequence[str]) -> list[str]:
        return as_user(self.cfg.service_user, [self.cfg.splunk_bin, *args])

    def is_installed(self) -> bool:
        b = Path(self.cfg.splunk_bin)
        return b.is_file() and os.access(b, os.X_OK)

    def is_running(self) -> bool:
        return run_cmd(self._as_service(["status"]), check=False).returncode == 0

    def first_start(self) -> CmdResult:
        return run_with_progress(
            "First start (accept license)...",
            self._as_service(["start", "--accept-license", "--answer-yes", "--no-prompt"]),
            console=self.console,
        )

    def start(self) -> CmdResult:
        return run_with_progress(
            "Starting Splunk...",
            self._as_service(["start", "--answer-yes", "--no-prompt"]),
            console=self.console,
        )

    def enable_boot_start(self) -> None:
        run_cmd(
            [self.cfg.splunk_bin, "enable", "boot-start", "-user", self.cfg.service_user],
            input_text="y\n",
        )

    def daemon_reload(self) -> None:
        run_cmd(["systemctl", "daemon-reload"])

    def write_seed(self) -> None:
        """Seed the admin credentials consumed by the first start."""

        seed = Path(self.cfg.seed_path)
        seed.parent.mkdir(parents=True, exist_ok=True)
        seed.write_text(
            "[user_info]\n"
            f"USERNAME = {self.cfg.admin_user}\n"
            f"PASSWORD = {self.cfg.admin_pass}\n",
            encoding="utf-8",
        )
        os.chmod(seed, 0o600)
        run_cmd(["chown", f"{self.cfg.service_user}:{self.cfg.service_user}", str(seed)])
        logger.info("Seeded admin credentials for %s", self.cfg.admin_user)

    def remove_seed(self) -> None:
        Path(self.cfg.seed_path).unlink(missing_ok=True)

    def add_oneshot(self, path: str) -> CmdResult:
        cfg = self.cfg
        return run_with_progress(
            f"Uploading {Path(path).name} to Splunk (oneshot)...",
            self._as_service(
                [
                    "add",
                    "oneshot",
                    path,
                    "-index",
                    cfg.ingest_index,
                    "-sourcetype",
                    cfg.ingest_sourcetype,
                    "-source",
                    cfg.ingest_source,
                    "-host",
                    cfg.ingest_host,
                    "-auth",
                    f"{cfg.admin_user}:{cfg.admin_pass}",
                ]
            ),
            console=self.console,
        )
