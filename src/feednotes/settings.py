import dataclasses
import json
import operator
import pathlib
import typing

import cattrs
import pygtrie

from .commontypes import Command

FEED_BINDINGS = {
    "q": "QUIT",
    "Q": "QUIT_WITHOUT_SAVING",
    "j": "SELECT_NEXT",
    "<Down>": "SELECT_NEXT",
    "k": "SELECT_PREVIOUS",
    "<Up>": "SELECT_PREVIOUS",
    "d d": "DELETE_NOTE",
    "n": "NEW_NOTE",
    "i": "EDIT_NOTE",
    "/": "EDIT_FILTER",
}

MOTION_BINDINGS = {
    "h": "MOVE_BACK",
    "<Left>": "MOVE_BACK",
    "j": "MOVE_DOWN",
    "<Down>": "MOVE_DOWN",
    "k": "MOVE_UP",
    "<Up>": "MOVE_UP",
    "l": "MOVE_FORWARD",
    "<Right>": "MOVE_FORWARD",
    "w": "MOVE_WORD_FORWARD",
    "b": "MOVE_WORD_BACK",
    "e": "MOVE_WORD_END",
    "^": "MOVE_LINE_START",
    "<Home>": "MOVE_LINE_START",
    "$": "MOVE_LINE_END",
    "<End>": "MOVE_LINE_END",
    "g g": "MOVE_TOP",
    "G": "MOVE_BOTTOM",
}

NORMAL_BINDINGS = MOTION_BINDINGS | {
    "W": "COMMIT",
    "<Backspace>": "ABANDON",
    "i": "INSERT",
    "A": "APPEND_AT_END",
    "o": "OPEN_BELOW",
    "O": "OPEN_ABOVE",
    "p": "PASTE",
    "u": "UNDO",
    "<C-r>": "REDO",
    "v": "VISUAL",
    "x": "DELETE_CHAR",
    "> >": "INDENT",
    "< <": "OUTDENT",
    "d d": "DELETE_LINE",
    "d w": "DELETE_WORD_FORWARD",
    "d b": "DELETE_WORD_BACK",
    "d i w": "DELETE_INNER_WORD",
}

VISUAL_BINDINGS = MOTION_BINDINGS | {
    "p": "PASTE",
    "u": "UNDO",
    "<C-r>": "REDO",
    "x": "DELETE_CHAR",
    "d": "CUT_SELECTION",
    "y": "COPY_SELECTION",
    "<Esc>": "CANCEL_SELECTION",
}

DEFAULT_NOTES_PATH = "~/.local/share/feednotes/notes.json"
DEFAULT_LOG_PATH = "~/.local/state/feednotes/feednotes.log"


def unstructure_bindings(t: pygtrie.Trie):
    return {" ".join(k): v.name for k, v in t.items()}


def structure_bindings(d: dict, typ: type[pygtrie.Trie]):
    return pygtrie.Trie({tuple(k.split()): Command[v] for k, v in d.items()})


def structure_path(v: str, typ: type[pathlib.Path]):
    return pathlib.Path(v).expanduser()


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(pygtrie.Trie, unstructure_bindings)
settings_converter.register_structure_hook(pygtrie.Trie, structure_bindings)
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, structure_path)
settings_converter.register_unstructure_hook(Command, operator.attrgetter("name"))
settings_converter.register_structure_hook(Command, lambda v, _: Command[v])


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: typing.Optional[pathlib.Path] = None
    notes_path: pathlib.Path
    log_path: pathlib.Path
    log_level: str = "INFO"
    enable_filtering: bool = True
    feed_bindings: pygtrie.Trie
    normal_bindings: pygtrie.Trie
    visual_bindings: pygtrie.Trie

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as out:
            json.dump(raw, out, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as f:
            raw = cls.default_values() | json.load(f)
        raw["_path"] = src
        return settings_converter.structure(raw, cls)

    @classmethod
    def default(cls):
        return settings_converter.structure(cls.default_values(), cls)

    @staticmethod
    def default_values():
        return {
            "notes_path": DEFAULT_NOTES_PATH,
            "log_path": DEFAULT_LOG_PATH,
            "feed_bindings": FEED_BINDINGS,
            "normal_bindings": NORMAL_BINDINGS,
            "visual_bindings": VISUAL_BINDINGS,
        }

    @classmethod
    def for_test(cls, **overrides):
        return settings_converter.structure(
            cls.default_values()
            | {
                "_path": "test.settings.json",
                "notes_path": "test.notes.json",
                "log_path": "test.log",
                "log_level": "DEBUG",
            }
            | overrides,
            cls,
        )


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))
