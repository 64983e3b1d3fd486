"""Ordered fallback chain of named steps."""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")


@dataclass(frozen=True)
class Step(Generic[C, R]):
    name: str
    run: Callable[[C], Optional[R]]


class FallbackChain(Generic[C, R]):
    """Evaluates steps in order and stops at the first non-None result."""

    def __init__(self, steps: Sequence[Step[C, R]]):
        self.steps: Tuple[Step[C, R], ...] = tuple(steps)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(step.name for step in self.steps)

    def first(self, context: C) -> Tuple[Optional[str], Optional[R]]:
        """
        Run the chain.

        Returns:
            (name of the step that produced the result, result), or (None, None)
            when every step came back empty
        """
        for step in self.steps:
            result = step.run(context)
            if result is not None:
                return step.name, result
        return None, None
