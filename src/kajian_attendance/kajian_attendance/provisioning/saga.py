from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.exceptions import OperationTimeout

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class CancellationToken:
    """Deadline checked between steps so a timed-out flow stops writing."""

    def __init__(self, timeout: Optional[float] = None, *, clock: Clock = time.monotonic):
        self._clock = clock
        self._deadline = clock() + timeout if timeout is not None else None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self._deadline is not None and self._clock() >= self._deadline

    def raise_if_cancelled(self, where: str) -> None:
        if self.cancelled:
            raise OperationTimeout(f"Timeout: Proses terlalu lama (dihentikan sebelum {where})")


@dataclass(frozen=True)
class SagaStep:
    name: str
    action: Callable[[dict[str, Any]], Any]
    compensation: Optional[Callable[[Any], None]] = None


class Saga:
    """Ordered (action, compensation) steps with rollback of completed steps.

    Each action receives the results of the earlier steps keyed by step name.
    On an ``Exception`` the completed compensations run in reverse order,
    best-effort: a failing compensation is logged and skipped. The original
    error is then re-raised. ``BaseException`` (interpreter exit, crash)
    is not intercepted, so nothing is compensated in that case.
    """

    def __init__(self, name: str, *, token: Optional[CancellationToken] = None):
        self.name = name
        self._token = token or CancellationToken()
        self._steps: list[SagaStep] = []
        self.failed_step: Optional[str] = None

    def step(
        self,
        name: str,
        action: Callable[[dict[str, Any]], Any],
        compensation: Optional[Callable[[Any], None]] = None,
    ) -> "Saga":
        self._steps.append(SagaStep(name, action, compensation))
        return self

    def execute(self) -> dict[str, Any]:
        results: dict[str, Any] = {}
        completed: list[tuple[SagaStep, Any]] = []

        logger.info("[%s] starting saga with %d steps", self.name, len(self._steps))
        try:
            for step in self._steps:
                self.failed_step = step.name
                self._token.raise_if_cancelled(step.name)
                logger.info("[%s] step %s", self.name, step.name)
                result = step.action(results)
                results[step.name] = result
                completed.append((step, result))
            self.failed_step = None
            # A step that overran the deadline still counts as timed out.
            self._token.raise_if_cancelled("commit")
        except Exception as exc:
            logger.error("[%s] failed after %d step(s): %s", self.name, len(completed), exc)
            self._compensate(completed)
            raise

        logger.info("[%s] completed", self.name)
        return results

    def _compensate(self, completed: list[tuple[SagaStep, Any]]) -> None:
        for step, result in reversed(completed):
            if step.compensation is None:
                continue
            try:
                step.compensation(result)
                logger.info("[%s] compensated %s", self.name, step.name)
            except Exception as comp_exc:
                logger.error("[%s] compensation for %s failed: %s", self.name, step.name, comp_exc)
