import datetime
import typing

import msgspec


class Note(msgspec.Struct, kw_only=True):
    text: str
    # stored as "date" so existing notes files keep loading
    created_at: datetime.datetime = msgspec.field(name="date")

    def __setattr__(self, name: str, value: typing.Any) -> None:
        if name != "text":
            raise AttributeError(f"The field {name!r} cannot be modified.")
        return super().__setattr__(name, value)


class NoteFile(msgspec.Struct, kw_only=True):
    notes: list[Note] = []
