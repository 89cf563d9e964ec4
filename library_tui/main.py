import logging
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from library_tui.app import App
from library_tui.config import settings
from library_tui.database import CatalogLoadError, CatalogSaveError, CatalogStore
from library_tui.events import read_event
from library_tui.ui_helpers import draw, print_list_result, set_output_mode

console = Console()
logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    # The terminal belongs to the UI, so log records go to a file
    logging.basicConfig(
        filename=settings.log_file,
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_session(session: App) -> bool:
    """Draw, read one key, apply it; until the session ends.

    Returns False when the user interrupts with Ctrl-C or Ctrl-D.
    """
    while session.running:
        draw(session.snapshot(), console)
        try:
            event = read_event()
        except (KeyboardInterrupt, EOFError):
            logger.info("Session interrupted on %s", session.current_screen)
            return False
        if event is None:
            continue
        session.handle(event)
    return True


# --- Typer CLI Application ---
app = typer.Typer(help=settings.app_name)

@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format for `list`: plain | json | rich (default: plain)",
    ),
):
    # Runs the session when no command is given
    if output:
        set_output_mode(output)
    if ctx.invoked_subcommand is None:
        cli_run()

@app.command("run")
def cli_run():
    """Start the interactive session."""
    _configure_logging()
    store = CatalogStore(settings.data_file)
    session = App(store)
    logger.info("Session started with %s", store.path)

    try:
        with console.screen(hide_cursor=True):
            completed = run_session(session)
    except (CatalogLoadError, CatalogSaveError) as e:
        logger.error("Session aborted: %s", e)
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    if not completed:
        console.print("[yellow]Session interrupted[/]")

    if session.library is None:
        logger.info("Session cancelled before the library was loaded")
        return

    try:
        store.save(session.library)
    except CatalogSaveError as e:
        logger.error("Shutdown save failed: %s", e)
        console.print(f"[bold red]Changes were not saved: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    console.print(f"[green]Library saved to {escape(str(store.path))}[/]")

@app.command("list")
def cli_list():
    """List all books in the saved library."""
    store = CatalogStore(settings.data_file)
    if not store.path.exists():
        print_list_result([])
        return
    try:
        library = store.load()
    except CatalogLoadError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    print_list_result(library.list_books() if library else [])


if __name__ == "__main__":
    app()
