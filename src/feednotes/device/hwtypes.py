from __future__ import annotations

import typing

import msgspec

from .keyboard_consts import KeyCode


class ModifierAnnotation(msgspec.Struct, frozen=True):
    alt: bool = False
    ctrl: bool = False


class AnnotatedKeyEvent(msgspec.Struct, frozen=True):
    key: KeyCode
    annotation: ModifierAnnotation = msgspec.field(default_factory=ModifierAnnotation)
    character: typing.Optional[str] = None

    @classmethod
    def char(cls, character: str, *, ctrl: bool = False, alt: bool = False):
        return cls(key=KeyCode.KEY_CHARACTER, annotation=ModifierAnnotation(ctrl=ctrl, alt=alt), character=character)

    @classmethod
    def named(cls, key: KeyCode):
        return cls(key=key)

    @property
    def is_printable(self):
        return self.key is KeyCode.KEY_CHARACTER and not (self.annotation.ctrl or self.annotation.alt)

    @property
    def token(self) -> str:
        """The name this key has in a binding table, such as ``d``, ``<C-r>`` or ``<Esc>``."""
        if self.key is not KeyCode.KEY_CHARACTER:
            return self.key.token
        name = "Space" if self.character == " " else self.character
        if self.annotation.ctrl:
            return f"<C-{name}>"
        if self.annotation.alt:
            return f"<M-{name}>"
        if name == "Space":
            return "<Space>"
        return name


def keys(sequence: str) -> list[AnnotatedKeyEvent]:
    """Turn a string of plain characters into key events; handy for tests and scripted input."""
    return [AnnotatedKeyEvent.char(c) for c in sequence]
