from __future__ import annotations

import pytest

from splunk_lab.config import InstallerConfig
from splunk_lab.lib.splunk import SplunkCtl
from splunk_lab.pipeline import InstallCtx, run_pipeline
from splunk_lab.state_store import ensure_defaults, is_step_completed


class RecordingStep:
    def __init__(self, step_id, *, one_time=False, fail=False):
        self.step_id = step_id
        self.title = f"Step {step_id}"
        self.one_time = one_time
        self.fail = fail
        self.runs = 0

    def run(self, ctx, state):
        self.runs += 1
        if self.fail:
            raise RuntimeError(f"{self.step_id} broke")
        return state


def _ctx(console, force=False):
    cfg = InstallerConfig()
    return InstallCtx(cfg=cfg, console=console, splunk=SplunkCtl(cfg, console), force=force)


def test_runs_all_steps_in_order_and_numbers_them(console):
    steps = [RecordingStep("a"), RecordingStep("b"), RecordingStep("c")]
    result = run_pipeline(ctx=_ctx(console), state=ensure_defaults({}), steps=steps)

    assert result.ran_steps == ["a", "b", "c"]
    assert result.skipped_steps == []
    assert result.state["execution"]["current_step"] is None
    out = console.out.getvalue()
    assert out.index("[1/3] Step a") < out.index("[2/3] Step b") < out.index("[3/3] Step c")


def test_one_time_step_is_skipped_once_completed(console):
    once = RecordingStep("once", one_time=True)
    always = RecordingStep("always")
    state = ensure_defaults({})

    run_pipeline(ctx=_ctx(console), state=state, steps=[always, once])
    result = run_pipeline(ctx=_ctx(console), state=state, steps=[always, once])

    assert once.runs == 1
    assert always.runs == 2
    assert result.skipped_steps == ["once"]


def test_force_reruns_one_time_steps(console):
    once = RecordingStep("once", one_time=True)
    state = ensure_defaults({})
    state["execution"]["completed_steps"] = ["once"]

    result = run_pipeline(ctx=_ctx(console, force=True), state=state, steps=[once])

    assert once.runs == 1
    assert result.ran_steps == ["once"]


def test_failure_stops_the_run_without_marking_the_step(console):
    first = RecordingStep("first")
    broken = RecordingStep("broken", fail=True)
    last = RecordingStep("last")
    state = ensure_defaults({})

    with pytest.raises(RuntimeError, match="broken broke"):
        run_pipeline(ctx=_ctx(console), state=state, steps=[first, broken, last])

    assert is_step_completed(state, "first")
    assert not is_step_completed(state, "broken")
    assert last.runs == 0
    assert state["execution"]["current_step"] == "broken"


def test_checkpoint_after_each_completed_step(console):
    saved = []
    steps = [RecordingStep("a"), RecordingStep("b", fail=True)]

    with pytest.raises(RuntimeError):
        run_pipeline(
            ctx=_ctx(console),
            state=ensure_defaults({}),
            steps=steps,
            checkpoint=lambda s: saved.append(list(s["execution"]["completed_steps"])),
        )

    assert saved == [["a"]]
