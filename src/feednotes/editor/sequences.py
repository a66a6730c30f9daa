from __future__ import annotations

import dataclasses
import logging
import typing

if typing.TYPE_CHECKING:
    import pygtrie

    from ..commontypes import Command

logger = logging.getLogger(__name__)


@dataclasses.dataclass(kw_only=True)
class SequenceMatched:
    command: Command


@dataclasses.dataclass(kw_only=True)
class SequencePending:
    pass


@dataclasses.dataclass(kw_only=True)
class SequenceDropped:
    tokens: tuple[str, ...]


@dataclasses.dataclass(kw_only=True)
class SequenceUnbound:
    token: str


SequenceResult = SequenceMatched | SequencePending | SequenceDropped | SequenceUnbound


class SequenceState:
    """Resolves multi-key commands such as ``d d`` or ``d i w`` one key at a time.

    Keys are collected while they still form the prefix of some binding. As soon as a key
    breaks the prefix, everything collected so far, that key included, is thrown away; the
    breaking key does not get a second chance as a command of its own.
    """

    pending: tuple[str, ...]

    def __init__(self, bindings: pygtrie.Trie):
        self.bindings = bindings
        self.pending = ()

    @property
    def active(self):
        return bool(self.pending)

    def reset(self):
        self.pending = ()

    def handle_token(self, token: str) -> SequenceResult:
        collected = self.pending + (token,)
        if self.bindings.has_key(collected):
            self.pending = ()
            return SequenceMatched(command=self.bindings[collected])
        if self.bindings.has_subtrie(collected):
            self.pending = collected
            return SequencePending()
        self.pending = ()
        if len(collected) == 1:
            return SequenceUnbound(token=token)
        logger.debug("Dropping key sequence %r", collected)
        return SequenceDropped(tokens=collected)

    @property
    def pending_chars(self):
        return "".join(self.pending)
