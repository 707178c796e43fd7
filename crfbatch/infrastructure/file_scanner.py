import logging
from pathlib import Path
from typing import List
from crfbatch.domain.errors import EmptySetError, NotFoundError
from crfbatch.domain.models import InputFile

logger = logging.getLogger(__name__)

class FileScanner:
    """Lists one directory (no recursion) for files with the target extension."""

    def __init__(self, extension: str = ".mp4"):
        # Literal, case-sensitive suffix match
        self.extension = extension

    def scan(self, directory: Path) -> List[InputFile]:
        """Returns matching files sorted by name.

        Raises NotFoundError if the directory can't be listed and
        EmptySetError if nothing matches.
        """
        directory = Path(directory)
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise NotFoundError(f"Cannot read input directory {directory}: {e}") from e

        files = [
            InputFile(path=entry, name=entry.name)
            for entry in entries
            if entry.name.endswith(self.extension) and entry.is_file()
        ]

        if not files:
            raise EmptySetError(f"No {self.extension} files found in {directory}")

        logger.info(f"Found {len(files)} video(s) in {directory}")
        return files
