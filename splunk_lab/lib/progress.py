from __future__ import annotations

from .console import Console


class Spinner:
    """Single-character spinner redrawn in place.

    The caller drives it with tick() from its own poll loop; it never
    starts a thread. On a non-terminal console it stays silent.
    """

    FRAMES = "-\\|/"

    def __init__(self, console: Console) -> None:
        self.console = console
        self._index = 0
        self._drawn = False

    def tick(self) -> None:
        if not self.console.is_tty:
            return
        frame = self.FRAMES[self._index % len(self.FRAMES)]
        self.console.write(frame + "\b")
        self._index += 1
        self._drawn = True

    def clear(self) -> None:
        if self._drawn:
            self.console.write(" \b")
            self._drawn = False
