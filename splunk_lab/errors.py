"""Failure taxonomy shared by the installer and the provisioner.

- FatalError: a precondition does not hold; abort, no retry.
- StepFailed: a long-running child command exited non-zero; abort with its status.
- OperatorDeclined: the operator answered "no" at a confirmation prompt.
- best_effort(): wraps operations whose failure must not stop the run.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class LabError(RuntimeError):
    exit_code = 1


class FatalError(LabError):
    pass


class OperatorDeclined(LabError):
    pass


class StepFailed(LabError):
    def __init__(self, message: str, *, returncode: int, output_tail: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output_tail = output_tail

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        if self.returncode < 0:
            # Killed by a signal: report it the way a shell would.
            return 128 - self.returncode
        return self.returncode or 1


class Outcome(enum.Enum):
    OK = "ok"
    RECOVERABLE = "recoverable"
    IGNORED = "ignored"


def best_effort(fn: Callable[[], Any], *, what: str, quiet: bool = False) -> Outcome:
    """Run fn, converting any failure into a non-fatal Outcome.

    quiet=True marks failures that are expected on some hosts; they are
    only logged at debug level.
    """

    try:
        fn()
    except Exception as e:
        if quiet:
            logger.debug("Ignored failure: %s (%s)", what, e)
            return Outcome.IGNORED
        logger.warning("Non-fatal: %s failed (%s)", what, e)
        return Outcome.RECOVERABLE
    return Outcome.OK
