import logging
from pathlib import Path

from core.exceptions import NotFound, ValidationError

log = logging.getLogger(__name__)


class VideoStorage:
    """Incident recordings stored as flat files under one directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, filename: str) -> Path:
        name = Path(filename).name
        if not filename or name != filename or name in {".", ".."}:
            raise ValidationError("Invalid video file name.")
        return self.root / name

    def path_for(self, filename: str) -> Path:
        """Absolute path of an existing recording; ``NotFound`` when it is gone."""
        file_path = self._resolve(filename)
        if not file_path.is_file():
            raise NotFound("File not found")
        return file_path

    def remove(self, filename: str) -> bool:
        """Delete a recording. Returns False when there was nothing to delete."""
        file_path = self._resolve(filename)
        try:
            file_path.unlink()
        except FileNotFoundError:
            log.warning("Video %s already absent from %s", filename, self.root)
            return False
        log.info("Deleted video %s", filename)
        return True
