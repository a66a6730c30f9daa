from __future__ import annotations

import argparse
import logging
import pathlib
import sys

import trio

from .commontypes import PersistenceError
from .device.keystreams import make_keystream
from .device.terminal import CursesTerminal
from .screens.base import Continue, Quit, Shutdown
from .screens.dispatcher import InputDispatcher
from .settings import Settings
from .storage import load_store, save_store

logger = logging.getLogger(__name__)


class FeedNotes:
    def __init__(self, settings: Settings):
        self.settings = settings
        # load before the terminal is touched, so a broken notes file aborts cleanly
        self.store = load_store(settings.notes_path)
        self.dispatcher = InputDispatcher(store=self.store, settings=settings)

    async def run(self) -> bool:
        """Run until the user quits. Returns whether the store should be saved."""
        with CursesTerminal(show_filter_hint=self.settings.enable_filtering) as terminal:
            async with make_keystream(terminal.raw_keys()) as keystream:
                terminal.paint(self.dispatcher.frame())
                async for event in keystream:
                    match self.dispatcher.handle_key(event):
                        case Shutdown():
                            logger.debug("Shutting down")
                            return True
                        case Quit():
                            logger.warning("Quitting without saving")
                            return False
                        case Continue():
                            pass
                    terminal.paint(self.dispatcher.frame())
        return False

    def save(self):
        save_store(self.store, self.settings.notes_path)


parser = argparse.ArgumentParser(prog="feednotes")
parser.add_argument("--settings", type=pathlib.Path, help="JSON settings file")
parser.add_argument("--notes", type=pathlib.Path, help="notes file (overrides the settings)")
parser.add_argument("--no-filter", action="store_true", help="disable the filter editor; Enter commits notes")
parser.add_argument("--debug", action="store_true", help="log at DEBUG level")


def load_settings(parsed: argparse.Namespace) -> Settings:
    settings = Settings.load(parsed.settings) if parsed.settings is not None else Settings.default()
    if parsed.notes is not None:
        settings.notes_path = parsed.notes.expanduser()
    if parsed.no_filter:
        settings.enable_filtering = False
    if parsed.debug:
        settings.log_level = "DEBUG"
    return settings


def main(argv=sys.argv):
    """
    Args:
        argv (list): List of arguments

    Returns:
        int: A return code
    """
    parsed = parser.parse_args(argv[1:])
    settings = load_settings(parsed)
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(filename=settings.log_path, level=settings.log_level)

    try:
        app = FeedNotes(settings)
    except PersistenceError as e:
        logger.error("%s", e)
        print(e, file=sys.stderr)
        return 1

    if trio.run(app.run):
        try:
            app.save()
        except PersistenceError as e:
            logger.error("%s", e)
            print(e, file=sys.stderr)
            return 1
    logger.debug("goodbye")
    return 0
