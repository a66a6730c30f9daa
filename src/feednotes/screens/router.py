import typing

import attr

from .base import Focus


@attr.define
class ViewRouter:
    """Which view owns the keyboard, and which feed entry is selected.

    ``selected`` indexes the current feed view, not the store.
    """

    focus: Focus = Focus.FEED
    selected: typing.Optional[int] = None
