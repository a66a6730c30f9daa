from __future__ import annotations

import datetime
import typing

from dateutil.tz import tzlocal

V = typing.TypeVar("V")


def now():
    return datetime.datetime.now(tzlocal())


def clamp(value: int, lower: int, upper: int):
    return max(lower, min(value, upper))


def replacing_at(items: typing.Sequence[V], index: int, item: V) -> list[V]:
    temp = list(items)
    temp[index] = item
    return temp
