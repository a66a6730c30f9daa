import typing

import msgspec

from ..editor.doctypes import Note

# (row, col) pairs; the selection end is exclusive
CursorPosition = tuple[int, int]


class FeedFrame(msgspec.Struct, frozen=True, kw_only=True):
    notes: tuple[Note, ...]
    selected: typing.Optional[int]
    filter_text: str = ""
    pending: str = ""


class EditorFrame(msgspec.Struct, frozen=True, kw_only=True):
    title: str
    lines: tuple[str, ...]
    cursor: CursorPosition
    selection: typing.Optional[tuple[CursorPosition, CursorPosition]] = None
    height: int
    pending: str = ""


Frame = FeedFrame | EditorFrame
