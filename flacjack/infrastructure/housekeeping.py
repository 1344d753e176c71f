import logging
import os
from pathlib import Path

class HousekeepingService:
    """Service for cleaning up leftovers of interrupted runs."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def cleanup_partial_outputs(self, directory: Path, target_extension: str = ".mp3") -> int:
        """Recursively removes partial encoder outputs under directory.

        Only ``*<target_extension>.tmp`` files are touched; those are the names
        the encoder writes to. Other ``.tmp`` files in the library are kept.
        Returns the number of files removed.
        """
        partial_suffix = f"{target_extension.lower()}.tmp"
        removed = 0
        for root, dirs, files in os.walk(directory):
            for file in files:
                if file.lower().endswith(partial_suffix):
                    try:
                        (Path(root) / file).unlink()
                        removed += 1
                    except OSError as e:
                        self.logger.warning(f"Failed to remove stale partial output {file}: {e}")
        if removed:
            self.logger.info(f"Removed {removed} stale partial output(s) from {directory}")
        return removed
