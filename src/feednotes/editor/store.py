# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

from ..commontypes import NoteIndexError
from .doctypes import Note, NoteFile

if typing.TYPE_CHECKING:
    import datetime
    from collections.abc import Iterable, Iterator


logger = logging.getLogger(__name__)


# The store is newest-first: new notes go in at position 0 and nothing else ever reorders it.
# Positions shift down by one behind a removal, so anything holding a position (the feed view,
# the selection, an edit target) has to be rebuilt after every mutation.
class NoteStore:
    def __init__(self, notes: typing.Optional[Iterable[Note]] = None):
        self._notes: list[Note] = list(notes) if notes is not None else []

    def __len__(self):
        return len(self._notes)

    def __getitem__(self, position: int) -> Note:
        self._check_position(position)
        return self._notes[position]

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def _check_position(self, position: int):
        if not 0 <= position < len(self._notes):
            raise NoteIndexError(position, len(self._notes))

    def insert_front(self, text: str, timestamp: datetime.datetime):
        self._notes.insert(0, Note(text=text, created_at=timestamp))
        logger.debug("Inserted note; store now has %d notes", len(self._notes))

    def remove_at(self, position: int) -> Note:
        self._check_position(position)
        removed = self._notes.pop(position)
        logger.debug("Removed note at %d; store now has %d notes", position, len(self._notes))
        return removed

    def set_text(self, position: int, text: str):
        self._check_position(position)
        self._notes[position].text = text

    def texts(self):
        return [note.text for note in self._notes]

    def to_file(self) -> NoteFile:
        return NoteFile(notes=list(self._notes))

    @classmethod
    def from_file(cls, note_file: NoteFile):
        return cls(note_file.notes)
