from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class BatchResult:
    """
    Outcome of a reorder or multi-file upload.

    `succeeded` keeps the keys in the order they were applied; `failed`
    maps each rejected key to a short reason.
    """
    succeeded: List[Any] = field(default_factory=list)
    failed: Dict[Any, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def summary(self) -> str:
        return f"{len(self.succeeded)} of {self.total} succeeded"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": list(self.succeeded),
            "failed": [
                {"key": key, "reason": reason}
                for key, reason in self.failed.items()
            ],
            "summary": self.summary,
        }
