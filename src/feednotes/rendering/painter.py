from __future__ import annotations

import contextlib
import curses
import logging
import typing

from .frames import EditorFrame, FeedFrame

if typing.TYPE_CHECKING:
    from .frames import Frame

logger = logging.getLogger(__name__)

FEED_WIDTH = 80
EDITOR_WIDTH = 60
EDITOR_TOP = 10
PADDING = 1
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
FEED_HINTS = "j/k move  n new  i edit  dd delete  / filter  q quit"
FEED_HINTS_NO_FILTER = "j/k move  n new  i edit  dd delete  q quit"

# rounded corners
TOP_LEFT, TOP_RIGHT, BOTTOM_LEFT, BOTTOM_RIGHT = "╭", "╮", "╰", "╯"
HORIZONTAL, VERTICAL = "─", "│"


def set_cursor_visibility(visibility: int):
    # not every terminal can hide the cursor
    with contextlib.suppress(curses.error):
        curses.curs_set(visibility)


class Painter:
    def __init__(self, screen: curses.window, *, show_filter_hint: bool = True):
        self.screen = screen
        self.show_filter_hint = show_filter_hint

    @property
    def size(self):
        return self.screen.getmaxyx()

    def put(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL):
        """Write text, clipped to the screen. The bottom-right cell is never written; curses errors on it."""
        height, width = self.size
        if not 0 <= y < height or x >= width:
            return
        if x < 0:
            text = text[-x:]
            x = 0
        room = width - x - (1 if y == height - 1 else 0)
        if room <= 0 or not text:
            return
        self.screen.addstr(y, x, text[:room], attr)

    def draw_box(self, y: int, x: int, height: int, width: int, title: str = "", attr: int = curses.A_NORMAL):
        inner = width - 2
        top = HORIZONTAL * inner
        if title:
            top = (title + top)[:inner]
        self.put(y, x, TOP_LEFT + top + TOP_RIGHT, attr)
        for row in range(1, height - 1):
            self.put(y + row, x, VERTICAL + " " * inner + VERTICAL, attr)
        self.put(y + height - 1, x, BOTTOM_LEFT + HORIZONTAL * inner + BOTTOM_RIGHT, attr)

    def paint(self, frame: Frame):
        self.screen.erase()
        match frame:
            case FeedFrame():
                self.paint_feed(frame)
            case EditorFrame():
                self.paint_editor(frame)
            case _:
                raise NotImplementedError(f"Don't know how to paint {type(frame)}.")
        self.screen.refresh()

    @staticmethod
    def note_height(text: str):
        return len(text.split("\n")) + 2 * PADDING + 2

    def paint_feed(self, frame: FeedFrame):
        set_cursor_visibility(0)
        screen_height, screen_width = self.size
        width = min(FEED_WIDTH, screen_width)
        x = (screen_width - width) // 2
        available = screen_height - 1
        heights = [self.note_height(note.text) for note in frame.notes]

        first = 0
        if frame.selected is not None:
            while first < frame.selected and sum(heights[first : frame.selected + 1]) > available:
                first += 1

        y = 0
        for index in range(first, len(frame.notes)):
            if y >= available:
                break
            note = frame.notes[index]
            attr = curses.A_REVERSE if index == frame.selected else curses.A_NORMAL
            self.draw_box(y, x, heights[index], width, note.created_at.strftime(TIMESTAMP_FORMAT), attr)
            inner_width = width - 2 - 2 * PADDING
            for offset, line in enumerate(note.text.split("\n")):
                self.put(y + 1 + PADDING + offset, x + 1 + PADDING, line[:inner_width], attr)
            y += heights[index]

        hints = FEED_HINTS if self.show_filter_hint else FEED_HINTS_NO_FILTER
        status = hints
        if frame.filter_text:
            status = f"filter: {frame.filter_text}  |  {status}"
        if frame.pending:
            status = f"{frame.pending}  {status}"
        self.put(screen_height - 1, 0, status, curses.A_DIM)

    def paint_editor(self, frame: EditorFrame):
        screen_height, screen_width = self.size
        width = min(EDITOR_WIDTH, screen_width)
        height = min(frame.height, screen_height)
        x = (screen_width - width) // 2
        y = max(0, min(EDITOR_TOP, screen_height - height))
        self.draw_box(y, x, height, width, frame.title)

        inner_height, inner_width = height - 2, width - 2
        cursor_row, cursor_col = frame.cursor
        first_row = max(0, cursor_row - inner_height + 1)
        first_col = max(0, cursor_col - inner_width + 1)
        for offset, line in enumerate(frame.lines[first_row : first_row + inner_height]):
            row = first_row + offset
            self.put(y + 1 + offset, x + 1, line[first_col : first_col + inner_width])
            span = self.selected_span(frame, row, len(line))
            if span is not None:
                start, end = span
                start, end = max(start, first_col), min(end, first_col + inner_width)
                if start < end:
                    self.put(y + 1 + offset, x + 1 + start - first_col, line[start:end], curses.A_REVERSE)

        if frame.pending:
            self.put(y + height, x, frame.pending, curses.A_DIM)
        set_cursor_visibility(1)
        self.screen.move(y + 1 + cursor_row - first_row, x + 1 + cursor_col - first_col)

    @staticmethod
    def selected_span(frame: EditorFrame, row: int, line_length: int) -> typing.Optional[tuple[int, int]]:
        if frame.selection is None:
            return None
        (start_row, start_col), (end_row, end_col) = frame.selection
        if not start_row <= row <= end_row:
            return None
        start = start_col if row == start_row else 0
        end = end_col if row == end_row else line_length
        return start, end
