# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import logging
import typing
import unicodedata

import attr

from ..device.keyboard_consts import KeyCode
from ..util import clamp

if typing.TYPE_CHECKING:
    from collections.abc import Iterable

    from ..device.hwtypes import AnnotatedKeyEvent


logger = logging.getLogger(__name__)

TAB = "    "
MAX_HISTORY = 50

# Columns count Python str indices (code points), not grapheme clusters. A combining accent is
# its own column as far as the cursor is concerned; notes are short plain text so we live with it.


class CursorMove(enum.Enum):
    FORWARD = enum.auto()
    BACK = enum.auto()
    UP = enum.auto()
    DOWN = enum.auto()
    HEAD = enum.auto()
    END = enum.auto()
    TOP = enum.auto()
    BOTTOM = enum.auto()
    WORD_FORWARD = enum.auto()
    WORD_BACK = enum.auto()
    WORD_END = enum.auto()


class CharKind(enum.Enum):
    SPACE = enum.auto()
    PUNCT = enum.auto()
    OTHER = enum.auto()

    @classmethod
    def of(cls, c: str):
        category = unicodedata.category(c)
        if c.isspace() or category.startswith("Z"):
            return cls.SPACE
        if category[0] in ("P", "S"):
            return cls.PUNCT
        return cls.OTHER


@attr.frozen(order=True)
class Position:
    row: int
    col: int


@attr.frozen
class Snapshot:
    lines: tuple[str, ...]
    cursor: Position


# A word starts wherever the character kind changes to something that is not whitespace.
def find_word_start_forward(line: str, start_col: int) -> typing.Optional[int]:
    if start_col >= len(line):
        return None
    prev = CharKind.of(line[start_col])
    for col in range(start_col + 1, len(line)):
        cur = CharKind.of(line[col])
        if cur is not CharKind.SPACE and cur is not prev:
            return col
        prev = cur
    return None


def find_word_exclusive_end_forward(line: str, start_col: int) -> typing.Optional[int]:
    if start_col >= len(line):
        return None
    prev = CharKind.of(line[start_col])
    for col in range(start_col + 1, len(line)):
        cur = CharKind.of(line[col])
        if prev is not CharKind.SPACE and cur is not prev:
            return col
        prev = cur
    return None


def find_word_inclusive_end_forward(line: str, start_col: int) -> typing.Optional[int]:
    if start_col >= len(line):
        return None
    prev = CharKind.of(line[start_col])
    last_col = start_col
    for col in range(start_col + 1, len(line)):
        cur = CharKind.of(line[col])
        if prev is not CharKind.SPACE and cur is not prev:
            return col - 1
        prev = cur
        last_col = col
    if prev is CharKind.SPACE:
        return None
    return last_col


def find_word_start_backward(line: str, start_col: int) -> typing.Optional[int]:
    start_col = min(start_col, len(line))
    if start_col == 0:
        return None
    cur = CharKind.of(line[start_col - 1])
    for col in range(start_col - 1, 0, -1):
        prev = CharKind.of(line[col - 1])
        if cur is not CharKind.SPACE and prev is not cur:
            return col
        cur = prev
    if cur is CharKind.SPACE:
        return None
    return 0


def is_word_start(line: str, col: int):
    if col >= len(line):
        return False
    if col == 0:
        return True
    return CharKind.of(line[col - 1]) is not CharKind.of(line[col])


class TextArea:
    """A multi-line text buffer with a cursor, an optional selection, one yank slot and undo.

    The cursor column may sit one past the last character of its line (where typed text is
    appended). The selection runs from the anchor to the cursor, end exclusive, in whichever
    order they happen to be.
    """

    def __init__(self, lines: typing.Optional[Iterable[str]] = None):
        self._lines: list[str] = list(lines) if lines is not None else []
        if not self._lines:
            self._lines = [""]
        self.cursor = Position(0, 0)
        self.selection_start: typing.Optional[Position] = None
        self.yank = ""
        self._undo: list[Snapshot] = []
        self._redo: list[Snapshot] = []

    @classmethod
    def from_text(cls, text: str):
        return cls(text.split("\n"))

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self):
        return "\n".join(self._lines)

    @property
    def current_line(self):
        return self._lines[self.cursor.row]

    @property
    def is_selecting(self):
        return self.selection_start is not None

    @property
    def selection_range(self) -> typing.Optional[tuple[Position, Position]]:
        if self.selection_start is None:
            return None
        start, end = sorted((self.selection_start, self.cursor))
        return start, end

    # history

    def _snapshot(self):
        return Snapshot(lines=tuple(self._lines), cursor=self.cursor)

    def _restore(self, snapshot: Snapshot):
        self._lines = list(snapshot.lines)
        self.cursor = snapshot.cursor
        self.selection_start = None

    def _push_history(self):
        self._undo.append(self._snapshot())
        if len(self._undo) > MAX_HISTORY:
            self._undo.pop(0)
        self._redo.clear()

    def undo(self):
        if not self._undo:
            return False
        self._redo.append(self._snapshot())
        self._restore(self._undo.pop())
        return True

    def redo(self):
        if not self._redo:
            return False
        self._undo.append(self._snapshot())
        self._restore(self._redo.pop())
        return True

    # import

    def set_lines(self, lines: Iterable[str]):
        """Replace the whole contents as one undoable step, keeping the cursor where it fits."""
        new_lines = list(lines) or [""]
        if new_lines == self._lines:
            return
        self._push_history()
        self._lines = new_lines
        self.selection_start = None
        self.jump(self.cursor.row, self.cursor.col)

    # motion

    def jump(self, row: int, col: int):
        row = clamp(row, 0, len(self._lines) - 1)
        self.cursor = Position(row, clamp(col, 0, len(self._lines[row])))

    def move_cursor(self, move: CursorMove):
        row, col = self.cursor.row, self.cursor.col
        line = self._lines[row]
        last_row = len(self._lines) - 1
        match move:
            case CursorMove.FORWARD:
                if col < len(line):
                    self.jump(row, col + 1)
                elif row < last_row:
                    self.jump(row + 1, 0)
            case CursorMove.BACK:
                if col > 0:
                    self.jump(row, col - 1)
                elif row > 0:
                    self.jump(row - 1, len(self._lines[row - 1]))
            case CursorMove.UP:
                self.jump(row - 1, col)
            case CursorMove.DOWN:
                self.jump(row + 1, col)
            case CursorMove.HEAD:
                self.jump(row, 0)
            case CursorMove.END:
                self.jump(row, len(line))
            case CursorMove.TOP:
                self.jump(0, col)
            case CursorMove.BOTTOM:
                self.jump(last_row, col)
            case CursorMove.WORD_FORWARD:
                found = find_word_start_forward(line, col)
                if found is not None:
                    self.jump(row, found)
                elif row < last_row:
                    self.jump(row + 1, 0)
                else:
                    self.jump(row, len(line))
            case CursorMove.WORD_BACK:
                found = find_word_start_backward(line, col)
                if found is not None:
                    self.jump(row, found)
                elif row > 0:
                    self.jump(row - 1, len(self._lines[row - 1]))
                else:
                    self.jump(row, 0)
            case CursorMove.WORD_END:
                found = find_word_inclusive_end_forward(line, col + 1)
                while found is None and row < last_row:
                    row += 1
                    found = find_word_inclusive_end_forward(self._lines[row], 0)
                if found is not None:
                    self.jump(row, found)
                else:
                    self.jump(row, len(self._lines[row]))
            case _:
                typing.assert_never(move)

    # low-level edits; callers record history

    def _text_between(self, start: Position, end: Position):
        if start.row == end.row:
            return self._lines[start.row][start.col : end.col]
        parts = [self._lines[start.row][start.col :]]
        parts.extend(self._lines[start.row + 1 : end.row])
        parts.append(self._lines[end.row][: end.col])
        return "\n".join(parts)

    def _remove_between(self, start: Position, end: Position):
        head = self._lines[start.row][: start.col]
        tail = self._lines[end.row][end.col :]
        self._lines[start.row : end.row + 1] = [head + tail]
        self.cursor = start

    def _insert_at_cursor(self, text: str):
        row, col = self.cursor.row, self.cursor.col
        line = self._lines[row]
        pieces = text.split("\n")
        if len(pieces) == 1:
            self._lines[row] = line[:col] + text + line[col:]
            self.cursor = Position(row, col + len(text))
            return
        new_lines = [line[:col] + pieces[0], *pieces[1:-1], pieces[-1] + line[col:]]
        self._lines[row : row + 1] = new_lines
        self.cursor = Position(row + len(pieces) - 1, len(pieces[-1]))

    def _delete_span(self, start: Position, end: Position, yank: bool):
        if start == end:
            return False
        self._push_history()
        if yank:
            self.yank = self._text_between(start, end)
        self._remove_between(start, end)
        return True

    def _end_of_buffer(self):
        last_row = len(self._lines) - 1
        return Position(last_row, len(self._lines[last_row]))

    def _position_after(self, position: Position):
        if position.col < len(self._lines[position.row]):
            return Position(position.row, position.col + 1)
        if position.row < len(self._lines) - 1:
            return Position(position.row + 1, 0)
        return position

    def _position_before(self, position: Position):
        if position.col > 0:
            return Position(position.row, position.col - 1)
        if position.row > 0:
            return Position(position.row - 1, len(self._lines[position.row - 1]))
        return position

    # edits

    def insert_char(self, c: str):
        self._push_history()
        self._insert_at_cursor(c)

    def insert_str(self, text: str):
        if not text:
            return
        self._push_history()
        self._insert_at_cursor(text)

    def insert_newline(self):
        self.insert_char("\n")

    def insert_tab(self):
        self.insert_str(TAB)

    def delete_char(self):
        """Delete the character before the cursor, joining onto the previous line at column zero."""
        return self._delete_span(self._position_before(self.cursor), self.cursor, yank=False)

    def delete_next_char(self):
        return self._delete_span(self.cursor, self._position_after(self.cursor), yank=False)

    def delete_line(self):
        """Delete the cursor's line along with its line break. The cursor lands on the line that followed."""
        row = self.cursor.row
        self._push_history()
        self.yank = self._lines[row]
        del self._lines[row]
        if not self._lines:
            self._lines = [""]
        self.jump(row, self.cursor.col)
        return True

    def delete_word(self):
        """Delete back to the start of the previous word."""
        row, col = self.cursor.row, self.cursor.col
        found = find_word_start_backward(self._lines[row], col)
        if found is not None:
            start = Position(row, found)
        elif col > 0:
            start = Position(row, 0)
        else:
            start = self._position_before(self.cursor)
        return self._delete_span(start, self.cursor, yank=True)

    def delete_next_word(self):
        """Delete up to the end of the word under (or after) the cursor."""
        row, col = self.cursor.row, self.cursor.col
        line = self._lines[row]
        found = find_word_exclusive_end_forward(line, col)
        if found is not None:
            end = Position(row, found)
        elif col < len(line):
            end = Position(row, len(line))
        else:
            end = self._position_after(self.cursor)
        return self._delete_span(self.cursor, end, yank=True)

    def delete_inner_word(self):
        """Delete the whole word under the cursor, from its first character forward."""
        line = self.current_line
        if not line:
            return False
        if not is_word_start(line, self.cursor.col):
            self.move_cursor(CursorMove.WORD_BACK)
        return self.delete_next_word()

    # selection and clipboard

    def start_selection(self):
        self.selection_start = self.cursor

    def cancel_selection(self):
        self.selection_start = None

    def cut(self):
        selected = self.selection_range
        self.selection_start = None
        if selected is None:
            return False
        return self._delete_span(*selected, yank=True)

    def copy(self):
        selected = self.selection_range
        self.selection_start = None
        if selected is None:
            return False
        self.yank = self._text_between(*selected)
        return True

    def paste(self):
        if not self.yank:
            return False
        self._push_history()
        self._insert_at_cursor(self.yank)
        return True

    # insert mode

    def input(self, event: AnnotatedKeyEvent):
        match event.key:
            case KeyCode.KEY_CHARACTER if event.is_printable:
                self.insert_char(event.character)
            case KeyCode.KEY_ENTER:
                self.insert_newline()
            case KeyCode.KEY_BACKSPACE:
                self.delete_char()
            case KeyCode.KEY_DELETE:
                self.delete_next_char()
            case KeyCode.KEY_TAB:
                self.insert_tab()
            case KeyCode.KEY_LEFT:
                self.move_cursor(CursorMove.BACK)
            case KeyCode.KEY_RIGHT:
                self.move_cursor(CursorMove.FORWARD)
            case KeyCode.KEY_UP:
                self.move_cursor(CursorMove.UP)
            case KeyCode.KEY_DOWN:
                self.move_cursor(CursorMove.DOWN)
            case KeyCode.KEY_HOME:
                self.move_cursor(CursorMove.HEAD)
            case KeyCode.KEY_END:
                self.move_cursor(CursorMove.END)
            case _:
                logger.debug("Insert mode ignoring %r", event)
