import enum
import typing

import msgspec


class Focus(enum.Enum):
    FEED = enum.auto()
    FILTER = enum.auto()
    NOTE = enum.auto()


class EditingMode(enum.Enum):
    NORMAL = enum.auto()
    INSERT = enum.auto()
    VISUAL = enum.auto()

    @property
    def title(self):
        return self.name.capitalize()


class NewNote(msgspec.Struct, frozen=True):
    pass


class EditNote(msgspec.Struct, frozen=True):
    position: int


EditingTarget = NewNote | EditNote


class Continue(msgspec.Struct, frozen=True):
    pass


class Quit(msgspec.Struct, frozen=True):
    pass


class Shutdown(msgspec.Struct, frozen=True):
    """Save the store, then quit."""


Action = Continue | Quit | Shutdown

CONTINUE: typing.Final = Continue()
