"""Adaptive choice of perturbation operations for simulated annealing."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

LEARNING_RATE = 0.1


class Operation(Enum):
    """Perturbation operations, in the order they are drawn."""

    ROTATE = "rotate"
    MOVE = "move"
    SWAP = "swap"
    CHANGE_REP = "changeRep"
    CONVERT_SYM = "convertSym"


OperationLike = Union[Operation, str]

MIN_PROBABILITIES: dict[Operation, float] = {
    Operation.ROTATE: 0.1,
    Operation.MOVE: 0.3,
    Operation.SWAP: 0.1,
    Operation.CHANGE_REP: 0.02,
    Operation.CONVERT_SYM: 0.02,
}


@dataclass
class OperationStats:
    """How often an operation was tried and how much it helped."""

    attempts: int = 0
    successes: int = 0
    total_improvement: float = 0.0
    average_improvement: float = 0.0

    @property
    def success_rate(self) -> float:
        return self.successes / self.attempts if self.attempts else 0.0


class AdaptivePerturbation:
    """Keeps operation probabilities and shifts them toward what pays off."""

    def __init__(
        self,
        rotate: float,
        move: float,
        swap: float,
        change_rep: float,
        convert_sym: float,
    ) -> None:
        self._probabilities: dict[Operation, float] = {
            Operation.ROTATE: rotate,
            Operation.MOVE: move,
            Operation.SWAP: swap,
            Operation.CHANGE_REP: change_rep,
            Operation.CONVERT_SYM: convert_sym,
        }
        self._stats: dict[Operation, OperationStats] = {
            op: OperationStats() for op in Operation
        }
        self.learning_rate = LEARNING_RATE
        self.min_probabilities = dict(MIN_PROBABILITIES)

    @staticmethod
    def _operation(operation: OperationLike) -> Operation:
        return Operation(operation)

    @property
    def probabilities(self) -> dict[Operation, float]:
        return dict(self._probabilities)

    @property
    def stats(self) -> dict[Operation, OperationStats]:
        return {op: replace(s) for op, s in self._stats.items()}

    def probability(self, operation: OperationLike) -> float:
        """Current probability of drawing the given operation."""
        return self._probabilities[self._operation(operation)]

    def record_attempt(self, operation: OperationLike) -> None:
        self._stats[self._operation(operation)].attempts += 1

    def record_success(self, operation: OperationLike, improvement: float) -> None:
        stats = self._stats[self._operation(operation)]
        stats.successes += 1
        stats.total_improvement += improvement
        stats.average_improvement = stats.total_improvement / stats.successes

    def update_probabilities(self) -> None:
        """Blend in probabilities weighted by observed improvement.

        Nothing changes until some operation has improved the cost. After an
        update the statistics are halved so that older results fade.
        """
        weighted_total = sum(
            s.success_rate * s.average_improvement
            for s in self._stats.values()
            if s.attempts
        )
        if weighted_total <= 0.0:
            return

        target: dict[Operation, float] = {}
        for op, s in self._stats.items():
            floor = self.min_probabilities[op]
            raw = (
                s.successes * s.average_improvement / weighted_total
                if s.attempts
                else floor
            )
            target[op] = max(raw, floor)
        target_total = sum(target.values())

        rate = self.learning_rate
        blended = {
            op: (1 - rate) * self._probabilities[op] + rate * target[op] / target_total
            for op in Operation
        }
        total = sum(blended.values())
        self._probabilities = {op: p / total for op, p in blended.items()}

        for s in self._stats.values():
            s.attempts = max(1, s.attempts // 2)
            s.successes = max(0, s.successes // 2)
            s.total_improvement = (
                s.average_improvement * s.successes if s.successes else 0.0
            )

    def format_stats(self) -> str:
        """Human-readable report of statistics and current probabilities."""
        lines = ["Operation Statistics:"]
        for op, s in sorted(self._stats.items(), key=lambda item: item[0].value):
            lines.append(
                f"  {op.value}: Attempts: {s.attempts}, Successes: {s.successes}, "
                f"Rate: {s.success_rate * 100.0:g}%, "
                f"Avg Improvement: {s.average_improvement:g}"
            )
        lines.append("Current Probabilities:")
        labels = {
            Operation.ROTATE: "Rotate",
            Operation.MOVE: "Move",
            Operation.SWAP: "Swap",
            Operation.CHANGE_REP: "ChangeRep",
            Operation.CONVERT_SYM: "ConvertSym",
        }
        for op, label in labels.items():
            lines.append(f"  {label}: {self._probabilities[op] * 100.0:g}%")
        return "\n".join(lines) + "\n"