from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ActionResult:
    """Outcome of a business operation plus any non-blocking advisories."""

    entity: Any
    warnings: list[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
