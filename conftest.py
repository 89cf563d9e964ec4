import pytest

from library_tui.app import App
from library_tui.config import settings
from library_tui.database import CatalogStore
from library_tui.events import Key, KeyEvent
from library_tui.library import Library

@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    # Each test gets its own catalog and log file
    monkeypatch.setattr(settings, "data_file", str(tmp_path / "library.json"))
    monkeypatch.setattr(settings, "log_file", str(tmp_path / "library-tui.log"))
    monkeypatch.delenv("LIB_CLI_OUTPUT", raising=False)

@pytest.fixture
def store():
    return CatalogStore(settings.data_file)

@pytest.fixture
def lib():
    return Library.initialize_demo("Ada")

@pytest.fixture
def session(store):
    return App(store)

@pytest.fixture
def loaded_session(store, lib):
    """Session that has already loaded a saved demo library and sits on Home."""
    store.save(lib)
    app = App(store)
    app.handle(KeyEvent(Key.ENTER))
    return app

@pytest.fixture
def press():
    """Feed keys to an app; strings are typed char by char, Key members sent as-is."""
    def _press(app, *keys):
        for k in keys:
            if isinstance(k, Key):
                app.handle(KeyEvent(k))
            else:
                for ch in k:
                    app.handle(KeyEvent.of_char(ch))
    return _press
