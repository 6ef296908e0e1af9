"""Markdown file storage on the local filesystem."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LocalFileStore:
    """
    Stores Markdown payloads as UTF-8 files in a single pages directory.

    Writes go to a temporary file that is renamed into place, so a failed or
    interrupted save never leaves a partial payload behind.

    Example:
        store = LocalFileStore(Path("./offline-notes/pages"))
        if store.save("5f0c....md", "# Title"):
            print(store.read("5f0c....md"))
    """

    def __init__(self, pages_dir: Path) -> None:
        """
        Initialize the file store.

        Args:
            pages_dir: Directory holding the Markdown files (created on demand)
        """
        self._pages_dir = Path(pages_dir)

    @property
    def pages_dir(self) -> Path:
        return self._pages_dir

    def _path_for(self, file_name: str) -> Path:
        """
        Resolve a file name inside the pages directory.

        Raises:
            ValueError: If the name would escape the pages directory
        """
        base = self._pages_dir.resolve()
        path = (base / file_name).resolve()
        try:
            path.relative_to(base)
        except ValueError as err:
            raise ValueError(f"File name {file_name!r} is outside {base}") from err
        if path == base:
            raise ValueError("File name must not be empty")
        return path

    def save(self, file_name: str, content: str) -> bool:
        tmp_name: Optional[str] = None
        try:
            path = self._path_for(file_name)
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            os.replace(tmp_name, path)
            tmp_name = None
            logger.debug(f"Saved markdown file: {file_name}")
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save markdown file {file_name}: {e}")
            return False
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def read(self, file_name: str) -> Optional[str]:
        try:
            path = self._path_for(file_name)
            if not path.exists():
                logger.error(f"Markdown file not found: {path}")
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read markdown file {file_name}: {e}")
            return None

    def delete(self, file_name: str) -> bool:
        try:
            path = self._path_for(file_name)
            path.unlink(missing_ok=True)
            logger.debug(f"Deleted markdown file: {file_name}")
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Failed to delete markdown file {file_name}: {e}")
            return False

    def size(self, file_name: str) -> int:
        """Size of the stored payload in bytes (0 if absent)."""
        try:
            path = self._path_for(file_name)
            return path.stat().st_size if path.exists() else 0
        except (OSError, ValueError) as e:
            logger.error(f"Failed to get file size for {file_name}: {e}")
            return 0
