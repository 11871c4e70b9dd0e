from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
import time
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import StepFailed
from .console import Console
from .progress import Spinner

logger = logging.getLogger(__name__)

DEFAULT_TAIL_LINES = 120
POLL_INTERVAL_S = 0.15


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def as_user(user: str, argv: Sequence[str]) -> list[str]:
    """Wrap argv so it runs under another account via su.

    The service account has a nologin shell, so bash is forced with -s.
    """

    return ["su", "-s", "/bin/bash", user, "-c", _fmt_argv(argv)]


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    input_text: str | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command (never input_text, which may carry passwords).
    - Captures stdout/stderr for the caller.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=dict(os.environ, **(env or {})),
    )

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise RuntimeError(f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr}")

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def run_with_progress(
    message: str,
    argv: Sequence[str],
    *,
    console: Console,
    input_text: str | None = None,
    tail_lines: int = DEFAULT_TAIL_LINES,
    interval: float = POLL_INTERVAL_S,
    env: Mapping[str, str] | None = None,
) -> CmdResult:
    """Run a long command as a child, showing a spinner while it works.

    stdout and stderr are merged into one capture. On non-zero exit the last
    tail_lines lines are shown on stderr and StepFailed carries the exit
    status up to the CLI.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))
    console.write(f"{message} ")

    spinner = Spinner(console)
    with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as capture:
        p = subprocess.Popen(
            argv_list,
            stdin=subprocess.PIPE if input_text is not None else subprocess.DEVNULL,
            stdout=capture,
            stderr=subprocess.STDOUT,
            text=True,
            env=dict(os.environ, **(env or {})),
        )
        if input_text is not None and p.stdin is not None:
            try:
                p.stdin.write(input_text)
            except BrokenPipeError:
                # Child exited without reading its input.
                pass
            finally:
                p.stdin.close()

        spinner.tick()
        while p.poll() is None:
            time.sleep(interval)
            spinner.tick()
        spinner.clear()

        capture.seek(0)
        output = capture.read()

    if output:
        logger.debug("OUTPUT %s", output.strip())

    if p.returncode == 0:
        console.line(console.green("done"))
        return CmdResult(argv=argv_list, returncode=0, stdout=output, stderr="")

    console.line(console.red("failed"))
    tail = "\n".join(output.splitlines()[-tail_lines:])
    console.block("---- last output ----", tail)
    logger.error("Command failed (%s): %s", p.returncode, _fmt_argv(argv_list))
    raise StepFailed(
        f"{message.rstrip('. ')} failed (exit {p.returncode})",
        returncode=p.returncode,
        output_tail=tail,
    )
