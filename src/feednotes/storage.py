# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import pathlib

import msgspec

from .commontypes import PersistenceError
from .editor.doctypes import NoteFile
from .editor.store import NoteStore

logger = logging.getLogger(__name__)

decoder = msgspec.json.Decoder(NoteFile)
encoder = msgspec.json.Encoder()


def load_store(path: pathlib.Path) -> NoteStore:
    """Read the whole store. A missing file is an empty store; anything else that goes wrong is fatal."""
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.info("No notes file at %s; starting with an empty store", path)
        return NoteStore()
    except OSError as e:
        raise PersistenceError(f"Unable to read notes from {path}: {e}") from e
    try:
        note_file = decoder.decode(raw)
    except msgspec.DecodeError as e:
        raise PersistenceError(f"Unable to parse notes in {path}: {e}") from e
    logger.info("Loaded %d notes from %s", len(note_file.notes), path)
    return NoteStore.from_file(note_file)


def save_store(store: NoteStore, path: pathlib.Path):
    """Overwrite the notes file with the whole store."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encoder.encode(store.to_file()))
    except OSError as e:
        raise PersistenceError(f"Unable to save notes to {path}: {e}") from e
    logger.info("Saved %d notes to %s", len(store), path)
