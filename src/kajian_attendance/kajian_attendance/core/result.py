from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Result:
    """Discriminated outcome of a coordinated flow.

    Exactly one of (success with data) or (error message) is set.
    """

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("successful Result cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("failed Result needs an error message")

    @classmethod
    def ok(cls, **data: Any) -> "Result":
        return cls(success=True, data=dict(data))

    @classmethod
    def fail(cls, error: Any) -> "Result":
        message = getattr(error, "message", None) or str(error) or error.__class__.__name__
        return cls(success=False, error=message)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def profile(self):
        return self.data.get("profile")

    @property
    def participant(self):
        return self.data.get("participant")
