from __future__ import annotations

import typing

import msgspec

if typing.TYPE_CHECKING:
    from .store import NoteStore


class FeedView(msgspec.Struct, frozen=True):
    """Store positions whose notes contain the filter text, in store order.

    Never patched in place: any change to the store or the filter builds a new one with
    :meth:`recompute`.
    """

    refs: tuple[int, ...] = ()

    @classmethod
    def recompute(cls, store: NoteStore, pattern: str):
        if pattern == "":
            return cls(refs=tuple(range(len(store))))
        return cls(refs=tuple(position for position, note in enumerate(store) if pattern in note.text))

    def __len__(self):
        return len(self.refs)

    def __getitem__(self, index: int) -> int:
        return self.refs[index]

    @property
    def is_empty(self):
        return not self.refs
