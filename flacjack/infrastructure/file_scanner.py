import logging
import os
from pathlib import Path
from typing import Generator, List


class FileScanner:
    """Recursively scans a directory tree for files with one extension.

    Directories that cannot be listed are logged and collected in ``errors``.
    When the root itself cannot be read the scan yields nothing.
    """

    def __init__(self, extension: str):
        ext = extension.lower()
        self.extension = ext if ext.startswith(".") else f".{ext}"
        self.errors: List[str] = []
        self.logger = logging.getLogger(__name__)

    def _on_walk_error(self, error: OSError):
        message = f"failed to read from directory {error.filename}: {error.strerror or error}"
        self.logger.error(message)
        self.errors.append(message)

    def scan(self, root_dir: Path) -> Generator[Path, None, None]:
        """Yields matching file paths in deterministic (sorted) order."""
        self.errors = []
        for root, dirs, files in os.walk(str(root_dir), onerror=self._on_walk_error):
            root_path = Path(root)

            # Ensure deterministic traversal: sort directories and files
            dirs.sort()
            files.sort()

            for file_name in files:
                file_path = root_path / file_name
                if not file_name.lower().endswith(self.extension):
                    continue
                yield file_path
