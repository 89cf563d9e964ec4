"""Library TUI - Core Application Package

This package contains the core application modules including:
- Book model and closed enums (book.py)
- Search matching rules (search.py)
- Catalog logic: search and checkout (library.py)
- JSON persistence layer (database.py)
- Keyboard events (events.py)
- Session state machine (app.py)
- Screen rendering (ui_helpers.py)
- CLI interface (main.py)
"""
