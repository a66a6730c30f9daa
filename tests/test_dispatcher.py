import datetime

import pytest
from feednotes.device.hwtypes import AnnotatedKeyEvent
from feednotes.device.keyboard_consts import KEY_TOKENS, KeyCode
from feednotes.editor.doctypes import Note
from feednotes.editor.store import NoteStore
from feednotes.editor.textarea import Position
from feednotes.rendering.frames import EditorFrame, FeedFrame
from feednotes.screens.base import Continue, EditingMode, EditNote, Focus, NewNote, Quit, Shutdown
from feednotes.screens.dispatcher import InputDispatcher
from feednotes.settings import Settings

WHEN = datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)
NAMED_KEYS = {token: code for code, token in KEY_TOKENS.items()}


def make_dispatcher(*texts: str, **overrides):
    store = NoteStore(Note(text=text, created_at=WHEN - datetime.timedelta(hours=i + 1)) for i, text in enumerate(texts))
    return InputDispatcher(store=store, settings=Settings.for_test(**overrides), clock=lambda: WHEN)


def event_for(token: str):
    if token in NAMED_KEYS:
        return AnnotatedKeyEvent.named(NAMED_KEYS[token])
    if token.startswith("<C-"):
        return AnnotatedKeyEvent.char(token[3], ctrl=True)
    return AnnotatedKeyEvent.char(token)


def press(dispatcher: InputDispatcher, *tokens: str):
    return [dispatcher.handle_key(event_for(token)) for token in tokens]


def edit_note(*lines: str):
    """A dispatcher in the middle of editing a single note with the given lines."""
    dispatcher = make_dispatcher("\n".join(lines))
    press(dispatcher, "i")
    assert dispatcher.router.focus is Focus.NOTE
    return dispatcher


def test_initial_state():
    dispatcher = make_dispatcher("a", "b")
    assert dispatcher.router.focus is Focus.FEED
    assert dispatcher.router.selected == 0
    assert make_dispatcher().router.selected is None


def test_new_note():
    dispatcher = make_dispatcher()
    press(dispatcher, "n")
    assert dispatcher.router.focus is Focus.NOTE
    assert dispatcher.mode is EditingMode.NORMAL
    assert dispatcher.target == NewNote()

    press(dispatcher, "i", *"hello", "<Esc>")
    assert dispatcher.mode is EditingMode.NORMAL
    assert dispatcher.store.texts() == []

    assert press(dispatcher, "W") == [Continue()]
    assert dispatcher.router.focus is Focus.FEED
    assert dispatcher.store.texts() == ["hello"]
    assert dispatcher.store[0].created_at == WHEN
    assert dispatcher.feed_view.refs == (0,)
    assert dispatcher.router.selected == 0


def test_new_note_goes_in_front():
    dispatcher = make_dispatcher("old")
    press(dispatcher, "n", "i", "a", "b", "<Enter>", "c", "d", "<Esc>", "W")
    assert dispatcher.store.texts() == ["ab\ncd", "old"]
    assert dispatcher.feed_view.refs == (0, 1)


def test_select_is_clamped():
    dispatcher = make_dispatcher("a", "b", "c")
    press(dispatcher, "k")
    assert dispatcher.router.selected == 0
    press(dispatcher, "j", "<Down>", "j", "j")
    assert dispatcher.router.selected == 2
    press(dispatcher, "<Up>")
    assert dispatcher.router.selected == 1


@pytest.mark.parametrize("start", [0, 1, 2])
def test_delete_selected(start):
    dispatcher = make_dispatcher("a", "b", "c")
    press(dispatcher, *["j"] * start)
    press(dispatcher, "d", "d")
    assert len(dispatcher.feed_view) == 2
    assert dispatcher.router.selected == max(start - 1, 0)
    assert dispatcher.store.texts() == [text for i, text in enumerate(["a", "b", "c"]) if i != start]


def test_delete_last_note():
    dispatcher = make_dispatcher("only")
    press(dispatcher, "d", "d")
    assert dispatcher.store.texts() == []
    assert dispatcher.router.selected is None
    # nothing left to act on
    press(dispatcher, "d", "d", "i", "j", "k")
    assert dispatcher.router.focus is Focus.FEED
    assert dispatcher.router.selected is None


def test_delete_prefix_ignored_without_selection():
    dispatcher = make_dispatcher()
    press(dispatcher, "d")
    assert dispatcher.pending == ""
    press(dispatcher, "n")
    assert dispatcher.router.focus is Focus.NOTE
    assert dispatcher.target == NewNote()


def test_delete_through_filter():
    dispatcher = make_dispatcher("apple", "berry", "avocado")
    press(dispatcher, "/", "a", "<Enter>")
    assert dispatcher.feed_view.refs == (0, 2)
    press(dispatcher, "j", "d", "d")
    assert dispatcher.store.texts() == ["apple", "berry"]
    assert dispatcher.feed_view.refs == (0,)
    assert dispatcher.router.selected == 0


def test_broken_sequence_is_dropped():
    dispatcher = make_dispatcher("a", "b")
    press(dispatcher, "d")
    assert dispatcher.pending == "d"
    press(dispatcher, "j")
    assert dispatcher.pending == ""
    assert dispatcher.router.selected == 0
    assert dispatcher.store.texts() == ["a", "b"]
    press(dispatcher, "j")
    assert dispatcher.router.selected == 1


@pytest.mark.parametrize("opener", [("n",), ("i",), ("i", "i", "z", "z", "<Esc>"), ("n", "i", "x", "<Esc>")])
def test_abandon_leaves_store_alone(opener):
    dispatcher = make_dispatcher("a", "b")
    refs = dispatcher.feed_view.refs
    press(dispatcher, *opener, "<Backspace>")
    assert dispatcher.router.focus is Focus.FEED
    assert dispatcher.textarea is None
    assert dispatcher.store.texts() == ["a", "b"]
    assert dispatcher.feed_view.refs == refs


def test_edit_keeps_timestamp():
    dispatcher = make_dispatcher("first", "second")
    created_at = [note.created_at for note in dispatcher.store]
    press(dispatcher, "j", "i")
    assert dispatcher.target == EditNote(position=1)
    assert dispatcher.textarea.lines == ["second"]

    press(dispatcher, "A", "!", "<Esc>", "W")
    assert dispatcher.store.texts() == ["first", "second!"]
    assert [note.created_at for note in dispatcher.store] == created_at
    assert dispatcher.router.selected == 1


def test_edit_through_filter_uses_store_position():
    dispatcher = make_dispatcher("alpha", "beta", "gamma")
    press(dispatcher, "/", "m", "<Enter>")
    assert dispatcher.feed_view.refs == (2,)
    press(dispatcher, "i", "A", "z", "<Esc>", "W")
    assert dispatcher.store.texts() == ["alpha", "beta", "gammaz"]
    assert dispatcher.feed_view.refs == (2,)

    # editing the match away empties the view
    press(dispatcher, "i", "d", "d", "i", *"zzz", "<Esc>", "W")
    assert dispatcher.store.texts() == ["alpha", "beta", "zzz"]
    assert dispatcher.feed_view.is_empty
    assert dispatcher.router.selected is None


def test_filter():
    dispatcher = make_dispatcher("alpha", "beta", "gamma")
    press(dispatcher, "/")
    assert dispatcher.router.focus is Focus.FILTER
    assert dispatcher.mode is EditingMode.INSERT

    press(dispatcher, "a", "l", "<Enter>")
    assert dispatcher.router.focus is Focus.FEED
    assert dispatcher.filter_text == "al"
    assert dispatcher.feed_view.refs == (0,)

    press(dispatcher, "/")
    assert dispatcher.textarea.lines == ["al"]
    assert dispatcher.textarea.cursor == Position(0, 2)
    press(dispatcher, "<Backspace>", "<Enter>")
    assert dispatcher.feed_view.refs == (0, 1, 2)

    press(dispatcher, "/", "<Backspace>", "b", "e", "<Esc>", "W")
    assert dispatcher.filter_text == "be"
    assert dispatcher.feed_view.refs == (1,)


def test_filtering_disabled():
    dispatcher = make_dispatcher("a", enable_filtering=False)
    press(dispatcher, "/")
    assert dispatcher.router.focus is Focus.FEED

    press(dispatcher, "n", "i", "x", "<Esc>", "<Enter>")
    assert dispatcher.router.focus is Focus.FEED
    assert dispatcher.store.texts() == ["x", "a"]


def test_enter_does_not_commit_with_filtering():
    dispatcher = make_dispatcher()
    press(dispatcher, "n", "i", "x", "<Esc>", "<Enter>")
    assert dispatcher.router.focus is Focus.NOTE
    assert dispatcher.store.texts() == []


def test_quit():
    dispatcher = make_dispatcher("a")
    assert press(dispatcher, "q") == [Shutdown()]
    assert press(dispatcher, "Q") == [Quit()]
    # only the feed can quit
    press(dispatcher, "n")
    assert press(dispatcher, "q") == [Continue()]


def test_resize_is_ignored():
    dispatcher = make_dispatcher("a")
    press(dispatcher, "d")
    press(dispatcher, "<Resize>")
    assert dispatcher.pending == "d"


@pytest.mark.parametrize("line", ["x", " x", "   x", "        x", ""])
def test_indent_then_outdent(line):
    dispatcher = edit_note(line)
    press(dispatcher, ">", ">")
    assert dispatcher.textarea.lines == ["    " + line]
    press(dispatcher, "<", "<")
    assert dispatcher.textarea.lines == [line]


def test_outdent_short_indent():
    dispatcher = edit_note("  x")
    press(dispatcher, "<", "<")
    assert dispatcher.textarea.lines == ["x"]
    press(dispatcher, "<", "<")
    assert dispatcher.textarea.lines == ["x"]
    press(dispatcher, "u")
    assert dispatcher.textarea.lines == ["  x"]


def test_insert_commands():
    dispatcher = edit_note("a")
    press(dispatcher, "o", "b", "<Esc>")
    assert dispatcher.textarea.lines == ["a", "b"]
    press(dispatcher, "O", "c", "<Esc>")
    assert dispatcher.textarea.lines == ["a", "c", "b"]
    press(dispatcher, "g", "g", "A", "z", "<Esc>")
    assert dispatcher.textarea.lines == ["az", "c", "b"]


def test_line_motions():
    dispatcher = edit_note("a", "bcd", "e")
    press(dispatcher, "G")
    assert dispatcher.textarea.cursor.row == 2
    press(dispatcher, "k", "$")
    assert dispatcher.textarea.cursor == Position(1, 3)
    press(dispatcher, "^")
    assert dispatcher.textarea.cursor == Position(1, 0)
    press(dispatcher, "g", "g")
    assert dispatcher.textarea.cursor.row == 0


def test_delete_char_undo_redo():
    dispatcher = edit_note("abc")
    press(dispatcher, "x")
    assert dispatcher.textarea.lines == ["bc"]
    press(dispatcher, "u")
    assert dispatcher.textarea.lines == ["abc"]
    press(dispatcher, "<C-r>")
    assert dispatcher.textarea.lines == ["bc"]


def test_delete_line():
    dispatcher = edit_note("a", "b", "c")
    press(dispatcher, "j", "d", "d")
    assert dispatcher.textarea.lines == ["a", "c"]
    assert dispatcher.textarea.cursor.row == 1
    press(dispatcher, "p")
    assert dispatcher.textarea.lines == ["a", "bc"]


def test_delete_word_forward_and_paste():
    dispatcher = edit_note("hello world")
    press(dispatcher, "d", "w")
    assert dispatcher.textarea.lines == ["world"]
    assert dispatcher.textarea.yank == "hello "
    press(dispatcher, "p")
    assert dispatcher.textarea.lines == ["hello world"]


def test_delete_word_back():
    dispatcher = edit_note("hello world")
    press(dispatcher, "$", "d", "b")
    assert dispatcher.textarea.lines == ["hello "]


def test_delete_inner_word():
    dispatcher = edit_note("foo bar baz")
    press(dispatcher, "w", "l", "d", "i", "w")
    assert dispatcher.textarea.lines == ["foo  baz"]


def test_broken_editor_sequence():
    dispatcher = edit_note("foo bar")
    press(dispatcher, "d", "i", "x")
    assert dispatcher.textarea.lines == ["foo bar"]
    assert dispatcher.pending == ""


def test_visual_copy():
    dispatcher = edit_note("hello world")
    press(dispatcher, "v")
    assert dispatcher.mode is EditingMode.VISUAL
    press(dispatcher, "e", "y")
    assert dispatcher.mode is EditingMode.NORMAL
    assert dispatcher.textarea.yank == "hello"
    assert dispatcher.textarea.lines == ["hello world"]
    assert not dispatcher.textarea.is_selecting

    press(dispatcher, "$", "p")
    assert dispatcher.textarea.lines == ["hello worldhello"]


def test_visual_cut():
    dispatcher = edit_note("hello world")
    press(dispatcher, "v", "e", "d")
    assert dispatcher.mode is EditingMode.NORMAL
    assert dispatcher.textarea.lines == [" world"]
    assert dispatcher.textarea.yank == "hello"


def test_visual_cancel():
    dispatcher = edit_note("hello world")
    press(dispatcher, "v", "l", "z", "<Esc>")
    assert dispatcher.mode is EditingMode.NORMAL
    assert not dispatcher.textarea.is_selecting
    assert dispatcher.textarea.lines == ["hello world"]


def test_visual_delete_char():
    dispatcher = edit_note("abc")
    press(dispatcher, "v", "l", "x")
    assert dispatcher.textarea.lines == ["ac"]
    assert dispatcher.mode is EditingMode.NORMAL
    assert not dispatcher.textarea.is_selecting


def test_visual_paste():
    dispatcher = edit_note("hello world")
    press(dispatcher, "d", "w", "v", "$", "p")
    assert dispatcher.textarea.lines == ["worldhello "]
    assert dispatcher.mode is EditingMode.NORMAL


def test_visual_undo_redo():
    dispatcher = edit_note("abc")
    press(dispatcher, "x", "v", "u")
    assert dispatcher.textarea.lines == ["abc"]
    assert dispatcher.mode is EditingMode.NORMAL
    press(dispatcher, "v", "<C-r>")
    assert dispatcher.textarea.lines == ["bc"]
    assert dispatcher.mode is EditingMode.NORMAL


def test_feed_frame():
    dispatcher = make_dispatcher("a", "b")
    press(dispatcher, "j", "d")
    frame = dispatcher.frame()
    assert isinstance(frame, FeedFrame)
    assert [note.text for note in frame.notes] == ["a", "b"]
    assert frame.selected == 1
    assert frame.pending == "d"


@pytest.mark.parametrize(
    "tokens,title,height",
    [
        (("n",), "New Note (Normal)", 10),
        (("n", "i"), "New Note (Insert)", 10),
        (("i", "v"), "Edit Note (Visual)", 10),
        (("/",), "Filtering (Insert)", 3),
        (("/", "<Esc>"), "Filtering (Normal)", 3),
    ],
)
def test_editor_frame(tokens, title, height):
    dispatcher = make_dispatcher("abc")
    press(dispatcher, *tokens)
    frame = dispatcher.frame()
    assert isinstance(frame, EditorFrame)
    assert frame.title == title
    assert frame.height == height


def test_editor_frame_selection():
    dispatcher = edit_note("abc", "def")
    press(dispatcher, "v", "j")
    frame = dispatcher.frame()
    assert frame.lines == ("abc", "def")
    assert frame.cursor == (1, 0)
    assert frame.selection == ((0, 0), (1, 0))
