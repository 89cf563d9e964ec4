import json

import pytest
from typer.testing import CliRunner

from library_tui.book import Book, Genre
from library_tui.config import settings
from library_tui.database import CatalogStore
from library_tui.events import Key, KeyEvent
from library_tui.library import Library
from library_tui.main import app

runner = CliRunner()

def _keys(*keys):
    """Build the stream returned by read_event; None is an ignored key, an exception is raised."""
    events = []
    for k in keys:
        if k is None or isinstance(k, BaseException):
            events.append(k)
        elif isinstance(k, Key):
            events.append(KeyEvent(k))
        else:
            events.extend(KeyEvent.of_char(ch) for ch in k)
    return iter(events)

@pytest.fixture
def feed(monkeypatch):
    def _feed(*keys):
        stream = _keys(*keys)

        def fake_read_event():
            item = next(stream)
            if isinstance(item, BaseException):
                raise item
            return item

        monkeypatch.setattr("library_tui.main.read_event", fake_read_event)
    return _feed

def test_list_no_books():
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No books in library." in result.stdout
    assert not CatalogStore(settings.data_file).path.exists()

def test_list_plain(store, lib):
    lib.checkout("9780451524935")
    store.save(lib)
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "9780743273565 - The Great Gatsby by F. Scott Fitzgerald [Available]" in result.stdout
    assert "9780451524935 - 1984 by George Orwell [Checked Out]" in result.stdout

def test_list_json(store, lib):
    store.save(lib)
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [b["isbn"] for b in payload] == ["9780743273565", "9780061120084", "9780451524935"]
    assert payload[2]["genre"] == "ScienceFiction"

def test_list_rich(store, lib):
    store.save(lib)
    result = runner.invoke(app, ["-o", "rich", "list"])
    assert result.exit_code == 0
    assert "Books" in result.stdout
    assert "9780061120084" in result.stdout

def test_list_corrupt_file(store):
    store.path.write_text("{", encoding="utf-8")
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "Error:" in result.stdout

def test_run_first_launch(feed, store):
    feed(Key.ENTER, "Ada", Key.ENTER, "q", "y")
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0, result.stdout
    assert "Library saved to" in result.stdout

    library = store.load()
    assert library.owner == "Ada"
    assert len(library.books) == 3

def test_run_is_default_command(feed, store, lib):
    store.save(lib)
    feed(Key.ENTER, "q", "y")
    result = runner.invoke(app, [])
    assert result.exit_code == 0, result.stdout
    assert "Library saved to" in result.stdout

def test_run_checkout_and_save(feed, store, lib):
    store.save(lib)
    feed(Key.ENTER, None, "s", "gatsby", Key.ENTER, Key.ENTER, Key.ENTER, "q", "y")
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0, result.stdout
    assert not store.load().find_book("9780743273565").is_available

def test_run_cancel_while_loading(feed, store):
    feed(Key.ESC)
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0
    assert "Library saved to" not in result.stdout
    assert not store.path.exists()

def test_run_corrupt_file(feed, store):
    store.path.write_text("not a library", encoding="utf-8")
    feed(Key.ENTER)
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 1
    assert "Error:" in result.stdout

def test_run_shutdown_save_failure(feed, store, lib, monkeypatch):
    store.save(lib)
    feed(Key.ENTER, "q", "y")

    def broken_save(self, library):
        from library_tui.database import CatalogSaveError
        raise CatalogSaveError("disk full")

    monkeypatch.setattr(CatalogStore, "save", broken_save)
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 1
    assert "Changes were not saved: disk full" in result.stdout

def test_help_uses_app_name():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert settings.app_name in result.stdout

def test_list_undecodable_file(store):
    store.path.write_bytes(b"\xff\xfe\x00garbage")
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "Error:" in result.stdout

def test_run_undecodable_file(feed, store):
    store.path.write_bytes(b"\xff\xfe")
    feed(Key.ENTER)
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 1
    assert "Error:" in result.stdout

def test_list_rich_with_markup_in_fields(store):
    lib = Library("Ada", [Book("Brackets", "[bold]Someone", "[/x]", 2001, Genre.MYSTERY)])
    store.save(lib)
    result = runner.invoke(app, ["-o", "rich", "list"])
    assert result.exit_code == 0, result.stdout
    assert "[/x]" in result.stdout

def test_run_with_markup_isbn_saves_checkout(feed, store):
    store.save(Library("Ada", [Book("Brackets", "Someone", "[/x]", 2001, Genre.MYSTERY)]))
    feed(Key.ENTER, "s", "brack", Key.ENTER, Key.ENTER, Key.ENTER, "q", "y")
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0, result.stdout
    assert not store.load().find_book("[/x]").is_available

@pytest.mark.parametrize("interrupt", [KeyboardInterrupt(), EOFError()])
def test_run_interrupted_still_saves(feed, store, lib, interrupt):
    store.save(lib)
    feed(Key.ENTER, "s", "gatsby", Key.ENTER, Key.ENTER, interrupt)
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0, result.stdout
    assert "Session interrupted" in result.stdout
    assert "Library saved to" in result.stdout
    assert not store.load().find_book("9780743273565").is_available

def test_run_interrupted_before_load(feed, store):
    feed(KeyboardInterrupt())
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0
    assert "Session interrupted" in result.stdout
    assert not store.path.exists()
