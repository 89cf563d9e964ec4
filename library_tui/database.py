import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from library_tui.book import Genre, Status
from library_tui.library import Library

logger = logging.getLogger(__name__)


# --- File schema ---
class BookRecord(BaseModel):
    title: str
    author: str
    isbn: str
    publication_year: int = Field(ge=0, le=65535)
    genre: Genre
    status: Status


class CatalogDocument(BaseModel):
    books: List[BookRecord]
    owner: str


class CatalogStore:
    """Loads and saves the whole catalog as a single JSON document."""

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Library]:
        """Load the catalog, or return None when first-run setup is needed.

        A missing file is replaced by an empty placeholder. An empty file is
        that placeholder left behind by an interrupted first run. Any other
        content that is not a valid catalog raises CatalogLoadError.
        """
        if not self.path.exists():
            try:
                self.path.touch()
            except OSError as e:
                raise CatalogLoadError(f"Could not create {self.path}: {e}") from e
            logger.info("No catalog at %s, created placeholder", self.path)
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogLoadError(f"Could not read {self.path}: {e}") from e

        if not raw.strip():
            logger.info("Catalog placeholder %s is empty", self.path)
            return None

        try:
            document = CatalogDocument.model_validate_json(raw)
        except ValidationError as e:
            raise CatalogLoadError(f"{self.path} is not a valid library file: {e}") from e

        library = Library.from_dict(document.model_dump(mode="json"))
        logger.info("Loaded %d books for %r from %s", len(library.books), library.owner, self.path)
        return library

    def save(self, library: Library) -> None:
        """Write the whole catalog in one call."""
        payload = json.dumps(library.to_dict(), indent=2, ensure_ascii=False)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as e:
            raise CatalogSaveError(f"Could not save library to {self.path}: {e}") from e
        logger.info("Saved %d books to %s", len(library.books), self.path)


class CatalogLoadError(Exception):
    """The catalog file exists but could not be read as a library."""


class CatalogSaveError(Exception):
    """The catalog could not be written."""
