import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from sitecms.domain.exceptions import Conflict, StorageError
from .base import StorageGateway

logger = logging.getLogger(__name__)


class LocalStorage(StorageGateway):
    provider_type = "local"

    def __init__(self, *, base_path: str, bucket: str, public_base_url: Optional[str] = None):
        super().__init__(bucket=bucket, public_base_url=public_base_url)
        self.base_path = Path(base_path) / bucket

    def _full_path(self, path: str) -> Path:
        relative = Path((path or "").strip("/"))
        if not relative.parts or ".." in relative.parts:
            raise StorageError(f"Invalid storage path: {path!r}")
        return self.base_path / relative

    def put(self, path: str, data: bytes, *, overwrite: bool = False,
            content_type: Optional[str] = None) -> str:
        full_path = self._full_path(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            # "xb" fails atomically when the object already exists.
            with open(full_path, "wb" if overwrite else "xb") as fh:
                fh.write(data)
        except FileExistsError as exc:
            raise Conflict(f"Object already exists: {path}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc

        logger.debug("local storage put path=%s bytes=%s overwrite=%s", path, len(data), overwrite)
        return path

    def remove(self, paths: Iterable[str]) -> None:
        for path in paths:
            full_path = self._full_path(path)
            try:
                full_path.unlink(missing_ok=True)
            except OSError as exc:
                raise StorageError(f"Failed to delete {path}: {exc}") from exc
            logger.debug("local storage remove path=%s", path)

    def list(self, prefix: str) -> List[Dict[str, str]]:
        folder = self._full_path(prefix)
        if not folder.is_dir():
            return []
        try:
            return sorted(
                ({"name": entry.name} for entry in folder.iterdir() if entry.is_file()),
                key=lambda entry: entry["name"],
            )
        except OSError as exc:
            raise StorageError(f"Failed to list {prefix}: {exc}") from exc

    def exists(self, path: str) -> bool:
        return self._full_path(path).is_file()

    def read(self, path: str) -> bytes:
        try:
            return self._full_path(path).read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc
