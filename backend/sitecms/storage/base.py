# sitecms/storage/base.py
"""
Object storage gateway.

Keep providers small and framework-agnostic so tests can run against the
local filesystem provider.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional


class StorageGateway:
    """
    Contract shared by every provider.

    - put: write an object; with overwrite=False an existing path raises
      Conflict, overwrite=True replaces it in place (fixed main-image slots).
    - remove: delete objects; missing paths are ignored.
    - list: objects directly under a folder prefix, as [{"name": ...}].
    - public_url: URL a browser can load the object from.
    """

    provider_type = "base"

    def __init__(self, *, bucket: str, public_base_url: Optional[str] = None):
        self.bucket = bucket
        self.public_base_url = (public_base_url or "").rstrip("/")

    def put(self, path: str, data: bytes, *, overwrite: bool = False,
            content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def remove(self, paths: Iterable[str]) -> None:
        raise NotImplementedError

    def list(self, prefix: str) -> List[Dict[str, str]]:
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def public_url(self, path: str) -> str:
        if not path:
            return ""
        # Legacy rows may already hold an absolute URL.
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.public_base_url}/{path.lstrip('/')}"
