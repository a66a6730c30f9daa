# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import curses
import enum

# A terminal hands us either a character (possibly a control character) or one of the
# curses KEY_* constants. Everything that is not a printable character gets a named code here;
# printable characters all share KEY_CHARACTER and carry the character itself on the event.


class KeyCode(enum.Enum):
    KEY_CHARACTER = enum.auto()
    KEY_ENTER = enum.auto()
    KEY_ESC = enum.auto()
    KEY_BACKSPACE = enum.auto()
    KEY_DELETE = enum.auto()
    KEY_TAB = enum.auto()
    KEY_UP = enum.auto()
    KEY_DOWN = enum.auto()
    KEY_LEFT = enum.auto()
    KEY_RIGHT = enum.auto()
    KEY_HOME = enum.auto()
    KEY_END = enum.auto()
    KEY_RESIZE = enum.auto()

    @property
    def token(self):
        return KEY_TOKENS[self]


KEY_TOKENS = {
    KeyCode.KEY_ENTER: "<Enter>",
    KeyCode.KEY_ESC: "<Esc>",
    KeyCode.KEY_BACKSPACE: "<Backspace>",
    KeyCode.KEY_DELETE: "<Del>",
    KeyCode.KEY_TAB: "<Tab>",
    KeyCode.KEY_UP: "<Up>",
    KeyCode.KEY_DOWN: "<Down>",
    KeyCode.KEY_LEFT: "<Left>",
    KeyCode.KEY_RIGHT: "<Right>",
    KeyCode.KEY_HOME: "<Home>",
    KeyCode.KEY_END: "<End>",
    KeyCode.KEY_RESIZE: "<Resize>",
}

# characters that arrive as plain str from get_wch but mean a named key
CONTROL_CHARACTERS = {
    "\x1b": KeyCode.KEY_ESC,
    "\n": KeyCode.KEY_ENTER,
    "\r": KeyCode.KEY_ENTER,
    "\t": KeyCode.KEY_TAB,
    "\x7f": KeyCode.KEY_BACKSPACE,
    "\x08": KeyCode.KEY_BACKSPACE,
}

CURSES_KEYS = {
    curses.KEY_ENTER: KeyCode.KEY_ENTER,
    curses.KEY_BACKSPACE: KeyCode.KEY_BACKSPACE,
    curses.KEY_DC: KeyCode.KEY_DELETE,
    curses.KEY_UP: KeyCode.KEY_UP,
    curses.KEY_DOWN: KeyCode.KEY_DOWN,
    curses.KEY_LEFT: KeyCode.KEY_LEFT,
    curses.KEY_RIGHT: KeyCode.KEY_RIGHT,
    curses.KEY_HOME: KeyCode.KEY_HOME,
    curses.KEY_END: KeyCode.KEY_END,
    curses.KEY_RESIZE: KeyCode.KEY_RESIZE,
}
