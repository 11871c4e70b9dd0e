from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .config import InstallerConfig, load_installer_config
from .errors import LabError, OperatorDeclined
from .lib.console import Console
from .lib.env import PATHS
from .lib.lock import exclusive_lock
from .lib.splunk import SplunkCtl
from .lib.sysinfo import require_root
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import InstallCtx, run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    AccessInfoStep,
    CheckArchStep,
    EnsureRunningStep,
    IngestSampleDataStep,
    InstallSplunkStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = PATHS.state_default


def build_steps():
    return [
        CheckArchStep(),
        InstallSplunkStep(),
        EnsureRunningStep(),
        IngestSampleDataStep(),
        AccessInfoStep(),
    ]


def run(
    *,
    cfg: Optional[InstallerConfig] = None,
    console: Optional[Console] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    force: bool = False,
) -> Dict[str, Any]:
    """Run the installer pipeline, persisting state after every step."""

    require_root("splunk-lab-install")

    actual_log_path = configure_logging(log_path=log_path)
    cfg = cfg or InstallerConfig()
    console = console or Console()

    with exclusive_lock(cfg.lock_path):
        state = ensure_defaults(load_state(state_path))
        state["execution"]["log_path"] = actual_log_path

        ctx = InstallCtx(cfg=cfg, console=console, splunk=SplunkCtl(cfg, console), force=force)

        try:
            result = run_pipeline(
                ctx=ctx,
                state=state,
                steps=build_steps(),
                checkpoint=lambda s: save_state(state_path, s),
            )
            state = result.state
            state["execution"]["summary"] = {
                "ran_steps": result.ran_steps,
                "skipped_steps": result.skipped_steps,
            }
            return state
        except LabError as e:
            logger.error("Installer stopped: %s", e)
            _record_error(state, e)
            raise
        except Exception as e:
            logger.exception("Installer failed")
            _record_error(state, e)
            raise
        finally:
            save_state(state_path, state)


def _record_error(state: Dict[str, Any], e: Exception) -> None:
    exe = state.setdefault("execution", {})
    exe.setdefault("errors", []).append({"step": exe.get("current_step"), "error": str(e)})


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="splunk-lab-install")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--config", default=None, help="Optional YAML file overriding installer defaults")
    p.add_argument("--force", action="store_true", help="Re-run one-time steps even if recorded as completed")

    args = p.parse_args(argv)
    console = Console()

    try:
        run(
            cfg=load_installer_config(args.config),
            console=console,
            state_path=args.state,
            log_path=args.log,
            force=args.force,
        )
    except OperatorDeclined:
        console.line("Exiting.")
        return 1
    except LabError as e:
        console.error(str(e))
        return e.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
