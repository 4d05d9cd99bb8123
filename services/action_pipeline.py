"""
Action pipeline — ordered filter chains for the three gated actions.

Each hook holds callbacks sorted by priority (lower runs first, ties keep
registration order). A callback receives the current value and the inbound
Submission and returns the value handed to the next callback. Raising stops
the chain; that is how a comment submission is halted.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from schemas.models.actions import Submission

AUTHENTICATE = "authenticate"
REGISTRATION_ERRORS = "registration_errors"
PREPROCESS_COMMENT = "preprocess_comment"

HOOKS = (AUTHENTICATE, REGISTRATION_ERRORS, PREPROCESS_COMMENT)

FilterCallback = Callable[[Any, Submission], Awaitable[Any]]


class ActionPipeline:
    def __init__(self) -> None:
        self._filters: dict[str, list[tuple[int, int, FilterCallback]]] = {
            hook: [] for hook in HOOKS
        }
        self._seq = 0

    def add_filter(
        self, hook: str, callback: FilterCallback, priority: int = 10
    ) -> None:
        if hook not in self._filters:
            raise ValueError(f"Unknown hook: {hook!r}")
        self._seq += 1
        self._filters[hook].append((priority, self._seq, callback))
        self._filters[hook].sort(key=lambda entry: (entry[0], entry[1]))

    def callbacks(self, hook: str) -> list[FilterCallback]:
        return [cb for _, _, cb in self._filters[hook]]

    async def apply_filters(self, hook: str, value: Any, submission: Submission) -> Any:
        for callback in self.callbacks(hook):
            value = await callback(value, submission)
        return value
