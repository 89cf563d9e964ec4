import os
import json
from typing import Any, Callable, Dict, List

from rich import box
from rich.console import Console, Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from library_tui.app import Screen, SessionView
from library_tui.config import settings
from library_tui.search import SearchCriteria

# Environment variable to control `list` output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_list_result(books: List[Any]) -> None:
    """Print the catalog in the current output mode.
    - plain: 'ISBN - Title by Author [Status]' lines, or 'No books in library.'
    - json: JSON array of the stored book fields
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Genre")
        table.add_column("Status")
        for b in books:
            color = "green" if b.is_available else "red"
            table.add_row(escape(b.isbn), escape(b.title), escape(b.author), str(b.publication_year),
                          escape(b.genre.label), Text(b.status.label, style=color))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.isbn} - {b.title} by {b.author} [{b.status.label}]")


# ------------------------- Interactive screens ------------------------- #
def _popup(title: str, message: str) -> Panel:
    return Panel(Text(message, justify="center"), title=title, box=box.ROUNDED,
                 padding=(1, 2), expand=False)

def _title_bar(view: SessionView) -> Panel:
    title = f"{settings.app_name} - {view.owner}'s Library"
    return Panel(Text(title, justify="center", style="bold white on black"), box=box.SQUARE)

def _book_list(view: SessionView) -> Table:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Author", width=25)
    table.add_column("Title", width=50)
    for b in view.books:
        style = "green" if b.available else "red"
        table.add_row(escape(b.author), escape(b.title), style=style)
    return table

def _footer(text: str) -> Text:
    return Text(text, style="dim")

def render_loading(view: SessionView) -> RenderableType:
    return _popup("Loading library, press Enter and wait...", "You can cancel by pressing ESC")

def render_new_owner(view: SessionView) -> RenderableType:
    return _popup("New Library", f"Enter the owner of the library: {view.owner_input}")

def render_home(view: SessionView) -> RenderableType:
    return Group(_title_bar(view), _book_list(view), _footer("(s) search  (q) quit"))

def render_searching(view: SessionView) -> RenderableType:
    mode = "typing query" if view.term_input_mode else "choosing field"
    criteria = Text.assemble(
        ("Search by: ", "bold"),
        *[(f" {c} ", "reverse" if c is view.searching_criteria else "") for c in SearchCriteria],
    )
    query = Panel(Text(view.searching_input or " "), title=f"Query ({mode})",
                  border_style="yellow" if view.term_input_mode else "white")
    return Group(
        _title_bar(view),
        criteria,
        query,
        _footer("(Tab) switch typing/field  (t) title  (a) author  (i) isbn  (q) quit  (Enter) search"),
    )

def render_checking_out(view: SessionView) -> RenderableType:
    book = view.selected_book
    info = Table.grid(padding=(0, 2))
    info.add_column(style="bold")
    info.add_column()
    info.add_row("Title", escape(book.title))
    info.add_row("Author", escape(book.author))
    info.add_row("ISBN", escape(book.isbn))
    info.add_row("Year", str(book.publication_year))
    info.add_row("Genre", escape(book.genre))
    info.add_row("Status", Text(book.status, style="green" if book.available else "red"))
    return Group(
        _title_bar(view),
        Panel(info, title="Check out this book?"),
        _footer("(Enter) check out  (b) back  (q) quit"),
    )

def render_checked_out_result(view: SessionView) -> RenderableType:
    lines = []
    if view.checkout_outcome is not None:
        lines.append(view.checkout_outcome.message)
    if view.error_message:
        lines.append(f"Error: {view.error_message}")
    if not lines:
        lines.append("Nothing happened")
    lines.append("Press Enter")
    return _popup("Checkout Result", "\n".join(lines))

def render_exiting(view: SessionView) -> RenderableType:
    return _popup(f"Exiting {escape(settings.app_name)}", "Are you sure you want to exit? (y/n)")


SCREEN_RENDERERS: Dict[Screen, Callable[[SessionView], RenderableType]] = {
    Screen.LOADING: render_loading,
    Screen.NEW_OWNER: render_new_owner,
    Screen.HOME: render_home,
    Screen.SEARCHING: render_searching,
    Screen.CHECKING_OUT: render_checking_out,
    Screen.CHECKED_OUT_RESULT: render_checked_out_result,
    Screen.EXITING: render_exiting,
}

def render(view: SessionView) -> RenderableType:
    return SCREEN_RENDERERS[view.screen](view)

def draw(view: SessionView, console: Console = _console) -> None:
    console.clear()
    console.print(render(view))
