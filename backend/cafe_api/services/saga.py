"""
Saga: ordered steps with compensating actions.

Multi-step writes that span the database and the object store cannot share
a transaction. Each step registers an undo; when a later step fails, every
completed step is compensated in reverse order and the original error is
re-raised.

Usage:
    saga = Saga("menu.create", menu_id=menu.id)
    saga.step("insert", insert_menu, compensate=delete_menu)
    saga.step("upload", lambda results: upload(results["insert"]), compensate=delete_blob)
    results = await saga.run()
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from cafe_shared.config.logging import get_logger

logger = get_logger(__name__)

# Actions receive the results of the previously completed steps by name.
Action = Callable[[dict[str, Any]], Any]
Compensation = Callable[[Any], Any]


@dataclass
class SagaStep:
    name: str
    action: Action
    compensate: Optional[Compensation] = None


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Saga:
    """A short ordered list of (action, compensation) pairs."""

    def __init__(self, name: str, **log_context: Any):
        self.name = name
        self._steps: list[SagaStep] = []
        self._log_context = log_context

    def step(self, name: str, action: Action, compensate: Optional[Compensation] = None) -> "Saga":
        self._steps.append(SagaStep(name, action, compensate))
        return self

    async def run(self) -> dict[str, Any]:
        """
        Execute every step in order.

        Returns:
            Mapping of step name to the value its action returned.

        Raises:
            Whatever the failing action raised, after compensation.
        """
        results: dict[str, Any] = {}
        completed: list[SagaStep] = []

        for step in self._steps:
            try:
                results[step.name] = await _resolve(step.action(dict(results)))
            except Exception as exc:
                logger.warning(
                    "Saga step failed, compensating",
                    saga=self.name,
                    step=step.name,
                    error=str(exc),
                    **self._log_context,
                )
                await self._compensate(completed, results)
                raise
            completed.append(step)

        return results

    async def _compensate(self, completed: list[SagaStep], results: dict[str, Any]) -> None:
        for step in reversed(completed):
            if step.compensate is None:
                continue
            try:
                await _resolve(step.compensate(results[step.name]))
            except Exception as exc:
                logger.error(
                    "Saga compensation failed",
                    saga=self.name,
                    step=step.name,
                    error=str(exc),
                    **self._log_context,
                )
