# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterable, cast

import trio

from .hwtypes import AnnotatedKeyEvent
from .keyboard_consts import CONTROL_CHARACTERS, CURSES_KEYS, KeyCode

# get_wch gives us a str for characters and an int for function keys
RawKey = str | int


def is_ctrl_letter(raw: str):
    return len(raw) == 1 and 1 <= ord(raw) <= 26


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# stage 1: drop anything we have no name for
class DropUnmapped(Section):
    async def pump(self, source: trio.MemoryReceiveChannel[RawKey], sink: trio.MemorySendChannel[RawKey]):
        async with aclosing(source), aclosing(sink):
            async for raw in source:
                if isinstance(raw, int):
                    if raw in CURSES_KEYS:
                        await sink.send(raw)
                elif raw in CONTROL_CHARACTERS or is_ctrl_letter(raw) or raw.isprintable():
                    await sink.send(raw)


# stage 2: convert raw input into key events, turning control characters into ctrl-annotated letters
class MakeKeyEvent(Section):
    async def pump(self, source: trio.MemoryReceiveChannel[RawKey], sink: trio.MemorySendChannel[AnnotatedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for raw in source:
                await sink.send(self.make_event(raw))

    @staticmethod
    def make_event(raw: RawKey) -> AnnotatedKeyEvent:
        if isinstance(raw, int):
            return AnnotatedKeyEvent.named(CURSES_KEYS[raw])
        if raw in CONTROL_CHARACTERS:
            return AnnotatedKeyEvent.named(CONTROL_CHARACTERS[raw])
        if is_ctrl_letter(raw):
            return AnnotatedKeyEvent.char(chr(ord(raw) + 96), ctrl=True)
        return AnnotatedKeyEvent(key=KeyCode.KEY_CHARACTER, character=raw)


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_keystream(raw_keys: AsyncIterable[RawKey]):
    sections = [
        DropUnmapped(),
        MakeKeyEvent(),
    ]

    async with pump_all(raw_keys, *sections) as keystream:
        yield cast(trio.MemoryReceiveChannel[AnnotatedKeyEvent], keystream)
