# solver/errors.py
from typing import Optional


class GenerationError(RuntimeError):
    """Base class for puzzle generation failures."""


class IllegalMove(GenerationError):
    """A forward move failed during replay of a solution."""

    def __init__(self, index: int, move, reason: str = "preconditions violated"):
        self.index = index
        self.move = move
        self.reason = reason
        super().__init__(f"move {index + 1} {move} failed: {reason}")


class StepBudgetExhausted(GenerationError):
    """One scramble attempt ran out of step tries before reaching its depth."""

    def __init__(self, reached: int, target: int, tries: int):
        self.reached = reached
        self.target = target
        self.tries = tries
        super().__init__(f"reached {reached}/{target} reverse moves after {tries} tries")


class AttemptBudgetExhausted(GenerationError):
    """Every restart for one configuration failed."""

    def __init__(self, config, attempts: int, last: Optional[StepBudgetExhausted] = None):
        self.config = config
        self.attempts = attempts
        self.last = last
        detail = f" (last attempt: {last})" if last is not None else ""
        super().__init__(
            f"Failed to generate a solvable puzzle for {config.label} "
            f"within {attempts} attempts{detail}"
        )


__all__ = [
    "GenerationError",
    "IllegalMove",
    "StepBudgetExhausted",
    "AttemptBudgetExhausted",
]
