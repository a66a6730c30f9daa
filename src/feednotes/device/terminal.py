from __future__ import annotations

import curses
import logging
import os
import typing

import trio

from ..rendering.painter import Painter

if typing.TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from ..rendering.frames import Frame
    from .keystreams import RawKey

logger = logging.getLogger(__name__)

# curses is not thread-safe, so keys are polled on the trio thread between paints
POLL_INTERVAL = 1 / 60


class CursesTerminal:
    """Owns the terminal while the app runs: hands out raw keys and paints frames."""

    screen: typing.Optional[curses.window]

    def __init__(self, *, show_filter_hint: bool = True):
        self.show_filter_hint = show_filter_hint
        self.screen = None
        self.painter = None

    def __enter__(self):
        # the default one-second escape delay makes leaving insert mode feel broken
        os.environ.setdefault("ESCDELAY", "25")
        self.screen = curses.initscr()
        curses.noecho()
        curses.raw()
        self.screen.keypad(True)
        self.screen.nodelay(True)
        self.painter = Painter(self.screen, show_filter_hint=self.show_filter_hint)
        logger.debug("Terminal initialised at %r", self.screen.getmaxyx())
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.screen.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()
        self.screen = None
        self.painter = None

    def read_raw(self) -> typing.Optional[RawKey]:
        try:
            return self.screen.get_wch()
        except curses.error:
            # get_wch signals "nothing pressed" with an error in nodelay mode
            return None

    async def raw_keys(self) -> AsyncIterator[RawKey]:
        while True:
            raw = self.read_raw()
            if raw is None:
                await trio.sleep(POLL_INTERVAL)
                continue
            yield raw

    def paint(self, frame: Frame):
        self.painter.paint(frame)
