from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest

from splunk_lab.config import InstallerConfig, ProvisionConfig
from splunk_lab.errors import StepFailed
from splunk_lab.lib.command import CmdResult
from splunk_lab.lib.console import Console

# Modules that bind run_cmd / run_with_progress by name.
_RUN_CMD_MODULES = [
    "splunk_lab.lib.accounts",
    "splunk_lab.lib.net",
    "splunk_lab.lib.splunk",
    "splunk_lab.lib.sshd",
    "splunk_lab.lib.sudoers",
    "splunk_lab.provision_steps",
]
_PROGRESS_MODULES = [
    "splunk_lab.lib.net",
    "splunk_lab.lib.splunk",
    "splunk_lab.steps.step_20_install_splunk",
]

ReturnCodes = Union[int, List[int]]


class FakeRunner:
    """Records argv lists and answers with scripted return codes.

    Rules match when their needle is a substring of the space-joined argv;
    the most recently added rule wins. A list of return codes is consumed
    one per call, the last value repeating.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self._rules: List[list] = []
        self.side_effects: Dict[str, Callable[[List[str]], None]] = {}

    def on(self, needle: str, *, returncode: ReturnCodes = 0, stdout: str = "") -> None:
        codes = list(returncode) if isinstance(returncode, list) else [returncode]
        self._rules.insert(0, [needle, codes, stdout])

    def _answer(self, argv: List[str]):
        joined = " ".join(argv)
        for needle, fn in self.side_effects.items():
            if needle in joined:
                fn(argv)
        for rule in self._rules:
            needle, codes, stdout = rule
            if needle in joined:
                rc = codes.pop(0) if len(codes) > 1 else codes[0]
                return rc, stdout
        return 0, ""

    def run_cmd(self, argv: Sequence[str], *, check: bool = True, env=None, input_text=None):
        argv_list = list(argv)
        self.calls.append(argv_list)
        self.inputs.append(input_text)
        rc, out = self._answer(argv_list)
        if check and rc != 0:
            raise RuntimeError(f"Command failed ({rc}): {' '.join(argv_list)}")
        return CmdResult(argv=argv_list, returncode=rc, stdout=out, stderr="")

    def run_with_progress(self, message: str, argv: Sequence[str], *, console, input_text=None, tail_lines=120, interval=0.15, env=None):
        argv_list = list(argv)
        self.calls.append(argv_list)
        self.inputs.append(input_text)
        rc, out = self._answer(argv_list)
        if rc != 0:
            raise StepFailed(f"{message} failed", returncode=rc, output_tail=out)
        return CmdResult(argv=argv_list, returncode=0, stdout=out, stderr="")

    def ran(self, needle: str) -> bool:
        return any(needle in " ".join(c) for c in self.calls)

    def count(self, needle: str) -> int:
        return sum(1 for c in self.calls if needle in " ".join(c))


@pytest.fixture
def fake_cmd(monkeypatch) -> FakeRunner:
    import importlib

    fake = FakeRunner()
    for name in _RUN_CMD_MODULES:
        monkeypatch.setattr(importlib.import_module(name), "run_cmd", fake.run_cmd)
    for name in _PROGRESS_MODULES:
        monkeypatch.setattr(importlib.import_module(name), "run_with_progress", fake.run_with_progress)
    return fake


def make_console(answer: str = "") -> Console:
    return Console(out=io.StringIO(), err=io.StringIO(), stdin=io.StringIO(answer))


@pytest.fixture
def console() -> Console:
    return make_console()


@pytest.fixture
def console_factory() -> Callable[[str], Console]:
    return make_console


@pytest.fixture
def as_root(monkeypatch) -> None:
    monkeypatch.setattr(os, "geteuid", lambda: 0)


@pytest.fixture
def installer_cfg(tmp_path: Path) -> InstallerConfig:
    return InstallerConfig(
        splunk_home=str(tmp_path / "opt" / "splunk"),
        download_dir=str(tmp_path / "tmp"),
        data_dir=str(tmp_path / "tmp" / "splunk_lab_data"),
        ingest_marker=str(tmp_path / "var" / "tmp" / ".splunk_pokedex_ingested"),
        disk_check_fallback=str(tmp_path),
        lock_path=str(tmp_path / "run" / "splunk-lab.lock"),
        min_free_gb=0,
    )


@pytest.fixture
def provision_cfg(tmp_path: Path) -> ProvisionConfig:
    src = tmp_path / "src" / "InstallSplunk.sh"
    src.parent.mkdir(parents=True)
    src.write_text("#!/usr/bin/env bash\n", encoding="utf-8")

    etc = tmp_path / "etc"
    (etc / "ssh").mkdir(parents=True)
    (etc / "ssh" / "sshd_config").write_text("Port 22\n#Banner none\n", encoding="utf-8")

    return ProvisionConfig(
        lab_user="student",
        lab_pass="S3cret!pass",
        script_src=str(src),
        home_root="/home",
        sudoers_file=str(etc / "sudoers.d" / "lab-splunk"),
        issue_file=str(etc / "issue"),
        motd_file=str(etc / "motd"),
        profile_banner=str(etc / "profile.d" / "lab-banner.sh"),
        sshd_config=str(etc / "ssh" / "sshd_config"),
        issue_net=str(etc / "issue.net"),
        lock_path=str(tmp_path / "run" / "splunk-lab.lock"),
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    """configure_logging() attaches handlers once per process; undo that per test."""

    yield
    root = logging.getLogger()
    if getattr(root, "_splunk_lab_configured", False):
        for h in list(root.handlers):
            if type(h) in (logging.FileHandler, logging.StreamHandler):
                root.removeHandler(h)
                h.close()
    for attr in ("_splunk_lab_configured", "_splunk_lab_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
