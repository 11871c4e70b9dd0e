from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .config import ProvisionConfig
from .errors import LabError
from .lib.console import Console
from .lib.lock import exclusive_lock
from .lib.sysinfo import require_root
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .provision_steps import ALL_STEPS, ProvisionCtx

logger = logging.getLogger(__name__)


def run_provision(
    *,
    cfg: Optional[ProvisionConfig] = None,
    console: Optional[Console] = None,
    log_path: str = DEFAULT_LOG_PATH,
) -> None:
    require_root("splunk-lab-provision")

    configure_logging(log_path=log_path)
    cfg = cfg or ProvisionConfig.from_env()
    console = console or Console()

    with exclusive_lock(cfg.lock_path):
        ctx = ProvisionCtx(cfg=cfg, console=console)
        logger.info("=== Provisioning lab user %s ===", cfg.lab_user)
        for fn in ALL_STEPS:
            logger.info("Running %s", fn.__name__)
            fn(ctx=ctx)

    console.line("Done.")
    console.line(f"User: {cfg.lab_user}")
    console.line(f"Script installed: {cfg.script_dest}")
    console.line(f"Pre-login: {cfg.issue_file}")
    console.line(f"Post-login: {cfg.motd_file} and {cfg.profile_banner}")
    if cfg.configure_ssh_banner and Path(cfg.sshd_config).is_file():
        console.line(f"SSH Banner: {cfg.issue_net} (enabled)")


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="splunk-lab-provision",
        description=(
            "Prepare a lab VM. Configured through LAB_USER, LAB_PASS, "
            "SPLUNK_SCRIPT_SRC, SET_PASSWORD and CONFIGURE_SSH_BANNER."
        ),
    )
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to provisioner log")

    args = p.parse_args(argv)
    console = Console()

    try:
        run_provision(console=console, log_path=args.log)
    except LabError as e:
        logger.error("Provisioning stopped: %s", e)
        console.error(str(e))
        return e.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
