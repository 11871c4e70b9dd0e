from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .config import InstallerConfig
from .lib.console import Console
from .lib.splunk import SplunkCtl
from .state_store import is_step_completed, mark_step_completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    cfg: InstallerConfig
    console: Console
    splunk: SplunkCtl
    force: bool = False


class Step(Protocol):
    """A single idempotent step.

    Steps with one_time=True are skipped once recorded as completed; all
    others run every time and carry their own guards (binary present,
    service running).
    """

    step_id: str
    title: str
    one_time: bool

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    skipped_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
    checkpoint: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> PipelineResult:
    """Run steps in order; a step raising aborts the rest of the run."""

    ran: List[str] = []
    skipped: List[str] = []
    total = len(steps)

    for index, step in enumerate(steps, start=1):
        ctx.console.step(index, total, step.title)
        state.setdefault("execution", {})["current_step"] = step.step_id

        if step.one_time and (not ctx.force) and is_step_completed(state, step.step_id):
            logger.info("Skipping step %s (already completed)", step.step_id)
            ctx.console.ok(f"{step.title}: already completed (skipping).")
            skipped.append(step.step_id)
            continue

        logger.info("Running step %s", step.step_id)
        state = step.run(ctx, state)
        mark_step_completed(state, step.step_id)
        ran.append(step.step_id)
        if checkpoint is not None:
            checkpoint(state)

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped)
