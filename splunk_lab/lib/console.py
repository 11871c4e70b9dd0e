from __future__ import annotations

import sys
from typing import Optional, TextIO

from colorama import Fore, Style

_YES = {"y", "Y", "yes", "YES"}


class Console:
    """Operator-facing output.

    Colors are only emitted when stdout is a terminal; log files never see
    this output (they get the logging records instead).
    """

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        stdin: Optional[TextIO] = None,
    ) -> None:
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.stdin = stdin or sys.stdin
        self.is_tty = _isatty(self.out)

    def _paint(self, color: str, text: str) -> str:
        if not self.is_tty:
            return text
        return f"{color}{text}{Style.RESET_ALL}"

    def bold(self, text: str) -> str:
        return self._paint(Style.BRIGHT, text)

    def green(self, text: str) -> str:
        return self._paint(Fore.GREEN, text)

    def red(self, text: str) -> str:
        return self._paint(Fore.RED, text)

    def write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def line(self, text: str = "") -> None:
        self.write(text + "\n")

    def step(self, index: int, total: int, title: str) -> None:
        self.line()
        self.line(f"{self._paint(Style.BRIGHT + Fore.CYAN, f'[{index}/{total}]')} {title}")

    def ok(self, msg: str) -> None:
        self.line(f"{self.green('OK')} - {msg}")

    def warn(self, msg: str) -> None:
        self.line(f"{self._paint(Fore.YELLOW, 'WARN')} - {msg}")

    def error(self, msg: str) -> None:
        self.err.write(f"{self.red('ERROR')} - {msg}\n")
        self.err.flush()

    def block(self, header: str, body: str) -> None:
        self.err.write(header + "\n")
        if body:
            self.err.write(body.rstrip("\n") + "\n")
        self.err.flush()

    def ask_yes_no(self, prompt: str) -> bool:
        """Ask a y/N question; EOF or anything but an explicit yes means no."""
        self.write(prompt)
        answer = self.stdin.readline()
        return answer.strip() in _YES


def _isatty(stream: TextIO) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False
