"""Resolution of the per-user directory the collections live in."""
import logging
from pathlib import Path
from typing import Optional, Union

from notelist.config import DEFAULT_DIR_NAME, NoteListConfig
from notelist.exceptions import ErrorCode, HomeDirectoryError, StorageError

logger = logging.getLogger(__name__)


class StorageLocation:
    """Resolves and creates the storage directory shared by both collections.

    Without an explicit root the directory is ``~/<dir_name>``. Passing a root
    uses it as-is, which keeps tests away from the real home directory.
    """

    def __init__(
        self,
        root: Optional[Union[str, Path]] = None,
        dir_name: str = DEFAULT_DIR_NAME,
    ):
        self.root = Path(root) if root is not None else None
        self.dir_name = dir_name

    @classmethod
    def from_config(cls, cfg: NoteListConfig) -> "StorageLocation":
        """Build a location from a NoteListConfig."""
        return cls(root=cfg.data_dir, dir_name=cfg.dir_name)

    def _home(self) -> Path:
        try:
            return Path.home()
        except (RuntimeError, KeyError) as e:
            raise HomeDirectoryError(original_error=e) from e

    def directory(self) -> Path:
        """Return the storage directory without touching the file system."""
        if self.root is not None:
            return self.root
        return self._home() / self.dir_name

    def resolve(self) -> Path:
        """Return the storage directory, creating it (and parents) if missing.

        Raises:
            HomeDirectoryError: If the home directory cannot be determined.
            StorageError: If the directory cannot be created.
        """
        app_dir = self.directory()
        if not app_dir.is_dir():
            try:
                app_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(
                    f"Failed to create app directory: {e}",
                    operation="mkdir",
                    path=str(app_dir),
                    code=ErrorCode.DIRECTORY_CREATE_FAILED,
                    original_error=e,
                ) from e
            logger.info(f"Created storage directory {app_dir}")
        return app_dir

    def path_for(self, filename: str) -> Path:
        """Path of a collection file inside the resolved directory."""
        return self.resolve() / filename

    def __repr__(self) -> str:
        return f"StorageLocation(root={self.root!r}, dir_name={self.dir_name!r})"
