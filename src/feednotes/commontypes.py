# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import enum


class Command(enum.Enum):
    # feed browsing
    QUIT = enum.auto()
    QUIT_WITHOUT_SAVING = enum.auto()
    SELECT_NEXT = enum.auto()
    SELECT_PREVIOUS = enum.auto()
    DELETE_NOTE = enum.auto()
    NEW_NOTE = enum.auto()
    EDIT_NOTE = enum.auto()
    EDIT_FILTER = enum.auto()

    # text editing, normal mode
    COMMIT = enum.auto()
    ABANDON = enum.auto()
    INSERT = enum.auto()
    APPEND_AT_END = enum.auto()
    OPEN_BELOW = enum.auto()
    OPEN_ABOVE = enum.auto()
    PASTE = enum.auto()
    UNDO = enum.auto()
    REDO = enum.auto()
    VISUAL = enum.auto()
    DELETE_CHAR = enum.auto()
    INDENT = enum.auto()
    OUTDENT = enum.auto()
    DELETE_LINE = enum.auto()
    DELETE_WORD_FORWARD = enum.auto()
    DELETE_WORD_BACK = enum.auto()
    DELETE_INNER_WORD = enum.auto()

    # text editing, visual mode
    CUT_SELECTION = enum.auto()
    COPY_SELECTION = enum.auto()
    CANCEL_SELECTION = enum.auto()

    # motions, shared by normal and visual mode
    MOVE_BACK = enum.auto()
    MOVE_DOWN = enum.auto()
    MOVE_UP = enum.auto()
    MOVE_FORWARD = enum.auto()
    MOVE_WORD_FORWARD = enum.auto()
    MOVE_WORD_BACK = enum.auto()
    MOVE_WORD_END = enum.auto()
    MOVE_LINE_START = enum.auto()
    MOVE_LINE_END = enum.auto()
    MOVE_TOP = enum.auto()
    MOVE_BOTTOM = enum.auto()

    @property
    def is_motion(self):
        return self.name.startswith("MOVE_")


class FeedNotesError(Exception):
    pass


class NoteIndexError(FeedNotesError, IndexError):
    def __init__(self, position: int, length: int):
        super().__init__(f"Note position {position} is out of range for a store of {length} notes.")
        self.position = position
        self.length = length


class PersistenceError(FeedNotesError):
    pass
