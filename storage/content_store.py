"""Content-store collaborator: turns a document path into raw text.

Read failures surface as DocumentUnreadable so triage can treat them
per-file and keep going.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import pdfplumber
from loguru import logger

from errors import DocumentUnreadable


TEXT_EXTENSIONS = {".txt", ".md", ".csv", ".json", ".xml", ".html", ".xer", ".rtf", ""}


class ContentStore(ABC):
    """Abstract source of document text."""

    @abstractmethod
    def read_object_content(self, path: str) -> str:
        """Return the full text of the object at `path`.

        Raises:
            DocumentUnreadable: If the object is missing or cannot be decoded.
        """
        pass


class LocalContentStore(ContentStore):
    """Reads text and PDF documents from the local filesystem."""

    def __init__(self, root: Optional[str] = None):
        """Initialize the store.

        Args:
            root: Directory relative paths are resolved against. Absolute paths
                  are used as-is.
        """
        self.root = Path(root) if root else None

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if self.root is not None and not candidate.is_absolute():
            return self.root / candidate
        return candidate

    def read_object_content(self, path: str) -> str:
        file_path = self._resolve(path)
        if not file_path.is_file():
            raise DocumentUnreadable(path, "file not found")

        suffix = file_path.suffix.lower()
        if suffix == ".pdf":
            return self._read_pdf(file_path, path)
        if suffix not in TEXT_EXTENSIONS:
            logger.warning(f"Reading {path} as text; extension {suffix} is not a known text format")

        try:
            return file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DocumentUnreadable(path, str(e)) from e

    def _read_pdf(self, file_path: Path, original: str) -> str:
        try:
            with pdfplumber.open(file_path) as pdf:
                pages = []
                for page_num, page in enumerate(pdf.pages, start=1):
                    page_text = page.extract_text()
                    if not page_text:
                        logger.warning(f"No text extracted from page {page_num} of {original}")
                        continue
                    pages.append(page_text)
        except Exception as e:
            raise DocumentUnreadable(original, f"invalid PDF: {e}") from e

        if not pages:
            raise DocumentUnreadable(original, "PDF contains no extractable text")
        return "\n\n".join(pages)


class InMemoryContentStore(ContentStore):
    """Serves documents from a dict; used for pre-uploaded bytes and tests."""

    def __init__(self, objects: Optional[Dict[str, str]] = None):
        self.objects: Dict[str, str] = dict(objects or {})

    def put(self, path: str, content: str) -> None:
        self.objects[path] = content

    def read_object_content(self, path: str) -> str:
        if path not in self.objects:
            raise DocumentUnreadable(path, "object not found")
        return self.objects[path]
