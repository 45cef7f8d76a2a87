"""Whole-file JSON persistence shared by the note and category repositories."""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Generic, List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notelist.exceptions import DecodeError, ErrorCode, StorageError
from notelist.storage.location import StorageLocation

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class JsonCollection(Generic[T]):
    """A flat JSON array of records stored in a single file.

    Every read loads the whole file; every write serializes the whole
    collection to a temporary file in the same directory and moves it over
    the target with ``os.replace``, so a crash mid-write never leaves a
    truncated collection behind.

    ``lock`` serializes load-modify-rewrite cycles within the process.
    Callers hold it around the full cycle, not just the write.
    """

    def __init__(
        self,
        location: StorageLocation,
        filename: str,
        model: Type[T],
        indent: int = 2,
    ):
        self.location = location
        self.filename = filename
        self.model = model
        self.indent = indent
        self._adapter = TypeAdapter(List[model])
        self.lock = threading.RLock()

    @property
    def label(self) -> str:
        """Human name of the collection used in error messages."""
        return Path(self.filename).stem

    def path(self) -> Path:
        """Resolve the backing file path, creating the directory if needed."""
        return self.location.path_for(self.filename)

    def read(self) -> List[T]:
        """Load every record. A missing file is an empty collection.

        Raises:
            StorageError: If the file exists but cannot be read.
            DecodeError: If the content is not a JSON array of valid records.
        """
        file_path = self.path()
        if not file_path.exists():
            return []

        try:
            contents = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(
                f"Failed to read {self.label} file: {e}",
                operation="read",
                path=str(file_path),
                code=ErrorCode.STORAGE_READ_FAILED,
                original_error=e,
            ) from e
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Failed to parse {self.label}: not valid UTF-8 text",
                path=str(file_path),
                original_error=e,
            ) from e

        return self.decode(contents, source=str(file_path))

    def decode(self, contents: str, source: str = "") -> List[T]:
        """Decode JSON text into records."""
        try:
            return self._adapter.validate_json(contents)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Failed to parse {self.label}: {e.error_count()} error(s), "
                f"first: {e.errors()[0]['msg']}",
                path=source or None,
                original_error=e,
            ) from e

    def encode(self, records: List[T]) -> str:
        """Serialize records as pretty-printed JSON text."""
        try:
            data = self._adapter.dump_python(records, mode="json")
            return json.dumps(data, indent=self.indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(
                f"Failed to serialize {self.label}: {e}",
                operation="encode",
                code=ErrorCode.ENCODE_FAILED,
                original_error=e,
            ) from e

    def write(self, records: List[T]) -> None:
        """Overwrite the backing file with ``records``.

        Raises:
            StorageError: If the file cannot be written.
        """
        contents = self.encode(records)
        file_path = self.path()
        atomic_write_text(file_path, contents, label=self.label)
        logger.debug(f"Wrote {len(records)} record(s) to {file_path}")


def atomic_write_text(file_path: Path, contents: str, label: str = "data") -> None:
    """Write text to ``file_path`` through a temp file and an atomic rename."""
    temp_name = None
    try:
        fd, temp_name = tempfile.mkstemp(
            dir=str(file_path.parent), prefix=f".{file_path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(contents)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, file_path)
    except OSError as e:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise StorageError(
            f"Failed to write {label} file: {e}",
            operation="write",
            path=str(file_path),
            code=ErrorCode.STORAGE_WRITE_FAILED,
            original_error=e,
        ) from e
