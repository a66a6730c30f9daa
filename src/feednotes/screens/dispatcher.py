from __future__ import annotations

import logging
import typing

import pygtrie

from ..commontypes import Command
from ..device.keyboard_consts import KeyCode
from ..editor.feedview import FeedView
from ..editor.sequences import SequenceMatched, SequencePending, SequenceState
from ..editor.textarea import TAB, CursorMove, TextArea
from ..rendering.frames import EditorFrame, FeedFrame
from ..util import clamp, now, replacing_at
from .base import CONTINUE, Action, EditingMode, EditingTarget, EditNote, Focus, NewNote, Quit, Shutdown
from .router import ViewRouter

if typing.TYPE_CHECKING:
    import datetime

    from ..device.hwtypes import AnnotatedKeyEvent
    from ..editor.store import NoteStore
    from ..rendering.frames import Frame
    from ..settings import Settings


logger = logging.getLogger(__name__)

MOTIONS = {
    Command.MOVE_BACK: CursorMove.BACK,
    Command.MOVE_DOWN: CursorMove.DOWN,
    Command.MOVE_UP: CursorMove.UP,
    Command.MOVE_FORWARD: CursorMove.FORWARD,
    Command.MOVE_WORD_FORWARD: CursorMove.WORD_FORWARD,
    Command.MOVE_WORD_BACK: CursorMove.WORD_BACK,
    Command.MOVE_WORD_END: CursorMove.WORD_END,
    Command.MOVE_LINE_START: CursorMove.HEAD,
    Command.MOVE_LINE_END: CursorMove.END,
    Command.MOVE_TOP: CursorMove.TOP,
    Command.MOVE_BOTTOM: CursorMove.BOTTOM,
}

NOTE_EDITOR_HEIGHT = 10
FILTER_EDITOR_HEIGHT = 3


class InputDispatcher:
    """Turns key events into changes to the note store, the feed view, and the edit session.

    All mutable state of a running session lives here. Each key is handled to completion before
    the next one arrives; a multi-key command waits in a :class:`SequenceState` until its last
    key comes in.
    """

    textarea: typing.Optional[TextArea]
    target: typing.Optional[EditingTarget]

    def __init__(
        self,
        *,
        store: NoteStore,
        settings: Settings,
        clock: typing.Callable[[], datetime.datetime] = now,
    ):
        self.store = store
        self.enable_filtering = settings.enable_filtering
        self.clock = clock
        self.router = ViewRouter()
        self.filter_text = ""
        self.feed_view = FeedView()
        self.mode = EditingMode.NORMAL
        self.textarea = None
        self.target = None

        normal_bindings = pygtrie.Trie(settings.normal_bindings)
        if not self.enable_filtering:
            # without a filter editor, Enter is free to commit the note
            normal_bindings[("<Enter>",)] = Command.COMMIT
        self.feed_sequence = SequenceState(settings.feed_bindings)
        self.editor_sequences = {
            EditingMode.NORMAL: SequenceState(normal_bindings),
            EditingMode.VISUAL: SequenceState(settings.visual_bindings),
        }
        self._recompute()

    # feed state

    @property
    def selected_position(self) -> typing.Optional[int]:
        if self.router.selected is None:
            return None
        return self.feed_view[self.router.selected]

    def _recompute(self):
        self.feed_view = FeedView.recompute(self.store, self.filter_text)
        selected = self.router.selected
        if self.feed_view.is_empty:
            self.router.selected = None
        elif selected is None:
            self.router.selected = 0
        else:
            self.router.selected = clamp(selected, 0, len(self.feed_view) - 1)

    def select_next(self):
        if self.router.selected is not None:
            self.router.selected = min(self.router.selected + 1, len(self.feed_view) - 1)

    def select_previous(self):
        if self.router.selected is not None:
            self.router.selected = max(self.router.selected - 1, 0)

    def delete_selected(self):
        if self.router.selected is None:
            return
        removed = self.store.remove_at(self.feed_view[self.router.selected])
        logger.debug("Deleted note from %s", removed.created_at)
        self.router.selected = max(self.router.selected - 1, 0)
        self._recompute()

    # edit sessions

    def _reset_sequences(self):
        self.feed_sequence.reset()
        for sequence in self.editor_sequences.values():
            sequence.reset()

    def _begin_session(self, focus: Focus, textarea: TextArea, mode: EditingMode, target: typing.Optional[EditingTarget] = None):
        self._reset_sequences()
        self.router.focus = focus
        self.textarea = textarea
        self.mode = mode
        self.target = target

    def _end_session(self):
        self._reset_sequences()
        self.router.focus = Focus.FEED
        self.textarea = None
        self.target = None
        self.mode = EditingMode.NORMAL

    def begin_new_note(self):
        self._begin_session(Focus.NOTE, TextArea(), EditingMode.NORMAL, NewNote())

    def begin_edit_note(self):
        position = self.selected_position
        if position is None:
            return
        self._begin_session(Focus.NOTE, TextArea.from_text(self.store[position].text), EditingMode.NORMAL, EditNote(position=position))

    def begin_filter(self):
        if not self.enable_filtering:
            return
        textarea = TextArea([self.filter_text])
        textarea.move_cursor(CursorMove.END)
        self._begin_session(Focus.FILTER, textarea, EditingMode.INSERT)

    def commit(self):
        if self.router.focus is Focus.FILTER:
            return self.commit_filter()
        text = self.textarea.text
        match self.target:
            case NewNote():
                self.store.insert_front(text, self.clock())
            case EditNote(position=position):
                self.store.set_text(position, text)
        logger.debug("Committed %r", self.target)
        self._end_session()
        self._recompute()

    def commit_filter(self):
        self.filter_text = "".join(self.textarea.lines)
        logger.debug("Filtering on %r", self.filter_text)
        self._end_session()
        self._recompute()

    def abandon(self):
        logger.debug("Abandoned edit session (%s)", self.router.focus)
        self._end_session()

    # key handling

    def handle_key(self, event: AnnotatedKeyEvent) -> Action:
        if event.key is KeyCode.KEY_RESIZE:
            return CONTINUE
        if self.router.focus is Focus.FEED:
            return self.handle_feed_key(event)
        return self.handle_editor_key(event)

    def handle_feed_key(self, event: AnnotatedKeyEvent) -> Action:
        result = self.feed_sequence.handle_token(event.token)
        if isinstance(result, SequencePending) and self.router.selected is None:
            # feed sequences act on the selection; with nothing selected the prefix key is ignored
            self.feed_sequence.reset()
            return CONTINUE
        if not isinstance(result, SequenceMatched):
            return CONTINUE
        match result.command:
            case Command.QUIT:
                return Shutdown()
            case Command.QUIT_WITHOUT_SAVING:
                return Quit()
            case Command.SELECT_NEXT:
                self.select_next()
            case Command.SELECT_PREVIOUS:
                self.select_previous()
            case Command.DELETE_NOTE:
                self.delete_selected()
            case Command.NEW_NOTE:
                self.begin_new_note()
            case Command.EDIT_NOTE:
                self.begin_edit_note()
            case Command.EDIT_FILTER:
                self.begin_filter()
            case command:
                logger.debug("%s does nothing in the feed", command)
        return CONTINUE

    def handle_editor_key(self, event: AnnotatedKeyEvent) -> Action:
        if self.router.focus is Focus.FILTER and event.key is KeyCode.KEY_ENTER:
            self.commit_filter()
            return CONTINUE
        if self.mode is EditingMode.INSERT:
            if event.key is KeyCode.KEY_ESC:
                self.mode = EditingMode.NORMAL
            else:
                self.textarea.input(event)
            return CONTINUE
        result = self.editor_sequences[self.mode].handle_token(event.token)
        if isinstance(result, SequenceMatched):
            self.run_editor_command(result.command)
        return CONTINUE

    def run_editor_command(self, command: Command):
        textarea = self.textarea
        if command.is_motion:
            textarea.move_cursor(MOTIONS[command])
            return
        match command:
            case Command.COMMIT:
                self.commit()
            case Command.ABANDON:
                self.abandon()
            case Command.INSERT:
                self.mode = EditingMode.INSERT
            case Command.APPEND_AT_END:
                textarea.move_cursor(CursorMove.END)
                self.mode = EditingMode.INSERT
            case Command.OPEN_BELOW:
                textarea.move_cursor(CursorMove.END)
                textarea.insert_newline()
                self.mode = EditingMode.INSERT
            case Command.OPEN_ABOVE:
                textarea.move_cursor(CursorMove.HEAD)
                textarea.insert_newline()
                textarea.move_cursor(CursorMove.UP)
                self.mode = EditingMode.INSERT
            case Command.PASTE:
                textarea.cancel_selection()
                textarea.paste()
            case Command.UNDO:
                textarea.undo()
            case Command.REDO:
                textarea.redo()
            case Command.VISUAL:
                textarea.start_selection()
                self.mode = EditingMode.VISUAL
            case Command.DELETE_CHAR:
                textarea.cancel_selection()
                textarea.delete_next_char()
            case Command.INDENT:
                self.indent_line()
            case Command.OUTDENT:
                self.outdent_line()
            case Command.DELETE_LINE:
                textarea.delete_line()
            case Command.DELETE_WORD_FORWARD:
                textarea.start_selection()
                textarea.move_cursor(CursorMove.WORD_FORWARD)
                textarea.cut()
            case Command.DELETE_WORD_BACK:
                textarea.delete_word()
            case Command.DELETE_INNER_WORD:
                textarea.delete_inner_word()
            case Command.CUT_SELECTION:
                textarea.move_cursor(CursorMove.FORWARD)
                textarea.cut()
                self.mode = EditingMode.NORMAL
            case Command.COPY_SELECTION:
                textarea.move_cursor(CursorMove.FORWARD)
                textarea.copy()
                self.mode = EditingMode.NORMAL
            case Command.CANCEL_SELECTION:
                textarea.cancel_selection()
                self.mode = EditingMode.NORMAL
            case _:
                logger.debug("%s does nothing in the editor", command)
        if self.mode is EditingMode.VISUAL and not textarea.is_selecting:
            # edits and undo drop the selection, and visual mode goes with it
            self.mode = EditingMode.NORMAL

    def indent_line(self):
        textarea = self.textarea
        row, col = textarea.cursor.row, textarea.cursor.col
        lines = textarea.lines
        textarea.set_lines(replacing_at(lines, row, TAB + lines[row]))
        textarea.jump(row, col)

    def outdent_line(self):
        textarea = self.textarea
        row, col = textarea.cursor.row, textarea.cursor.col
        lines = textarea.lines
        line = lines[row]
        leading = len(line) - len(line.lstrip(" "))
        textarea.set_lines(replacing_at(lines, row, line[min(leading, len(TAB)) :]))
        textarea.jump(row, col)

    # rendering

    @property
    def pending(self):
        if self.router.focus is Focus.FEED:
            return self.feed_sequence.pending_chars
        if self.mode is EditingMode.INSERT:
            return ""
        return self.editor_sequences[self.mode].pending_chars

    @property
    def title(self):
        if self.router.focus is Focus.FILTER:
            name = "Filtering"
        elif isinstance(self.target, EditNote):
            name = "Edit Note"
        else:
            name = "New Note"
        return f"{name} ({self.mode.title})"

    def frame(self) -> Frame:
        if self.router.focus is Focus.FEED:
            return FeedFrame(
                notes=tuple(self.store[position] for position in self.feed_view.refs),
                selected=self.router.selected,
                filter_text=self.filter_text,
                pending=self.pending,
            )
        textarea = self.textarea
        selection = None
        if textarea.selection_range is not None:
            start, end = textarea.selection_range
            selection = ((start.row, start.col), (end.row, end.col))
        return EditorFrame(
            title=self.title,
            lines=tuple(textarea.lines),
            cursor=(textarea.cursor.row, textarea.cursor.col),
            selection=selection,
            height=FILTER_EDITOR_HEIGHT if self.router.focus is Focus.FILTER else NOTE_EDITOR_HEIGHT,
            pending=self.pending,
        )
