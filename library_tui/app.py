"""Session state machine for the interactive library tool.

``App`` holds all per-run state and exposes one transition function,
``App.handle``, which consumes a single key event and returns the next
screen, or ``None`` once the session is over. Catalog search/checkout and
every persistence call happen inside ``handle`` through the injected
``CatalogStore``; rendering only ever sees the ``SessionView`` returned by
``App.snapshot``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, Optional, Tuple

from library_tui.book import Book
from library_tui.database import CatalogSaveError, CatalogStore
from library_tui.events import Key, KeyEvent
from library_tui.library import CheckoutError, Library
from library_tui.search import SearchCriteria

logger = logging.getLogger(__name__)


class Screen(Enum):
    LOADING = auto()
    NEW_OWNER = auto()
    HOME = auto()
    SEARCHING = auto()
    CHECKING_OUT = auto()
    CHECKED_OUT_RESULT = auto()
    EXITING = auto()


# Single-character shortcuts
QUIT_KEY = "q"
SEARCH_KEY = "s"
BACK_KEY = "b"
CONFIRM_EXIT_KEY = "y"
CANCEL_EXIT_KEY = "n"
CRITERIA_KEYS = {
    "t": SearchCriteria.TITLE,
    "a": SearchCriteria.AUTHOR,
    "i": SearchCriteria.ISBN,
}


@dataclass(frozen=True)
class CheckoutOutcome:
    """Result of the last checkout attempt, kept as data for the result screen."""

    error: Optional[CheckoutError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return "Success" if self.error is None else f"Error: {self.error}"


@dataclass(frozen=True)
class BookView:
    title: str
    author: str
    isbn: str
    publication_year: int
    genre: str
    status: str
    available: bool

    @classmethod
    def of(cls, book: Book) -> "BookView":
        return cls(
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            publication_year=book.publication_year,
            genre=book.genre.label,
            status=book.status.label,
            available=book.is_available,
        )


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot of the session, enough to draw any screen."""

    screen: Optional[Screen]
    owner: Optional[str]
    books: Tuple[BookView, ...]
    owner_input: str
    searching_criteria: SearchCriteria
    searching_input: str
    term_input_mode: bool
    selected_book: Optional[BookView]
    checkout_outcome: Optional[CheckoutOutcome]
    error_message: Optional[str]


class App:
    """Mutable session state plus the transition function driving it."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store
        self.loaded = False
        self.current_screen: Optional[Screen] = Screen.LOADING
        self.library: Optional[Library] = None
        self.owner_input = ""
        self.searching_criteria = SearchCriteria.TITLE
        self.searching_input = ""
        self.term_input_mode = False
        self.selected_book: Optional[Book] = None
        self.checkout_outcome: Optional[CheckoutOutcome] = None
        self.error_message: Optional[str] = None

        self._handlers: Dict[Screen, Callable[[KeyEvent], Optional[Screen]]] = {
            Screen.LOADING: self._on_loading,
            Screen.NEW_OWNER: self._on_new_owner,
            Screen.HOME: self._on_home,
            Screen.SEARCHING: self._on_searching,
            Screen.CHECKING_OUT: self._on_checking_out,
            Screen.CHECKED_OUT_RESULT: self._on_checked_out_result,
            Screen.EXITING: self._on_exiting,
        }

    @property
    def running(self) -> bool:
        return self.current_screen is not None

    def handle(self, event: KeyEvent) -> Optional[Screen]:
        """Apply one key event. Returns the next screen, or None when the session ends.

        CatalogLoadError and CatalogSaveError from loading or first-run seeding
        propagate to the caller. Checkout failures never do.
        """
        if self.current_screen is None:
            raise RuntimeError("Session has already ended")
        next_screen = self._handlers[self.current_screen](event)
        if next_screen is not self.current_screen:
            logger.debug("Screen %s -> %s", self.current_screen, next_screen)
        self.current_screen = next_screen
        return next_screen

    # ------------------------- Screen handlers ------------------------- #
    def _on_loading(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is Key.ESC:
            return None
        if event.key is Key.ENTER:
            self.library = self.store.load()
            self.loaded = self.library is not None
            return Screen.HOME if self.loaded else Screen.NEW_OWNER
        return Screen.LOADING

    def _on_new_owner(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is Key.CHAR:
            self.owner_input += event.char
        elif event.key is Key.BACKSPACE:
            self.owner_input = self.owner_input[:-1]
        elif event.key is Key.ENTER:
            library = Library.initialize_demo(self.owner_input)
            self.store.save(library)
            self.library = library
            self.loaded = True
            return Screen.HOME
        return Screen.NEW_OWNER

    def _on_home(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is not Key.CHAR:
            return Screen.HOME
        if event.char == QUIT_KEY:
            return Screen.EXITING
        if event.char == SEARCH_KEY:
            self.searching_input = ""
            self.selected_book = None
            self.term_input_mode = True
            return Screen.SEARCHING
        return Screen.HOME

    def _on_searching(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is Key.TAB:
            self.term_input_mode = not self.term_input_mode
        elif event.key is Key.CHAR:
            if self.term_input_mode:
                self.searching_input += event.char
            elif event.char in CRITERIA_KEYS:
                self.searching_criteria = CRITERIA_KEYS[event.char]
            elif event.char == QUIT_KEY:
                return Screen.EXITING
        elif event.key is Key.BACKSPACE:
            self.searching_input = self.searching_input[:-1]
        elif event.key is Key.ENTER:
            return self._apply_search()
        return Screen.SEARCHING

    def _apply_search(self) -> Screen:
        if not self.searching_input:
            return Screen.SEARCHING
        self.selected_book = self.library.search(self.searching_criteria, self.searching_input)
        if self.selected_book is None:
            logger.debug("No match for %s %r", self.searching_criteria, self.searching_input)
            return Screen.SEARCHING
        return Screen.CHECKING_OUT

    def _on_checking_out(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is Key.ENTER:
            self._check_out()
            return Screen.CHECKED_OUT_RESULT
        if event.key is Key.CHAR and event.char == QUIT_KEY:
            return Screen.EXITING
        if event.key is Key.CHAR and event.char == BACK_KEY:
            return Screen.HOME
        return Screen.CHECKING_OUT

    def _check_out(self) -> None:
        self.checkout_outcome = None
        self.error_message = None
        if self.library is None or self.selected_book is None:
            self.error_message = "Book not found"
            return
        try:
            self.library.checkout(self.selected_book.isbn)
        except CheckoutError as e:
            self.checkout_outcome = CheckoutOutcome(error=e)
            return
        self.checkout_outcome = CheckoutOutcome()
        try:
            self.store.save(self.library)
        except CatalogSaveError as e:
            logger.error("Save after checkout failed: %s", e)
            self.error_message = str(e)

    def _on_checked_out_result(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is Key.ENTER:
            return Screen.HOME
        return Screen.CHECKED_OUT_RESULT

    def _on_exiting(self, event: KeyEvent) -> Optional[Screen]:
        if event.key is Key.CHAR and event.char == CONFIRM_EXIT_KEY:
            return None
        if event.key is Key.CHAR and event.char == CANCEL_EXIT_KEY:
            return Screen.HOME
        return Screen.EXITING

    # ------------------------- Presentation ------------------------- #
    def snapshot(self) -> SessionView:
        books: Tuple[BookView, ...] = ()
        owner = None
        if self.library is not None:
            books = tuple(BookView.of(b) for b in self.library.books)
            owner = self.library.owner
        return SessionView(
            screen=self.current_screen,
            owner=owner,
            books=books,
            owner_input=self.owner_input,
            searching_criteria=self.searching_criteria,
            searching_input=self.searching_input,
            term_input_mode=self.term_input_mode,
            selected_book=BookView.of(self.selected_book) if self.selected_book else None,
            checkout_outcome=self.checkout_outcome,
            error_message=self.error_message,
        )
