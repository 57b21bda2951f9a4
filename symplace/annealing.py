"""Simulated annealing over a placement representation."""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Mapping, Optional, Protocol, Sequence

from symplace.adaptive import AdaptivePerturbation, Operation
from symplace.symmetry import SymmetryGroup
from symplace.timeout import PlacementTimeout, TimeoutManager

logger = logging.getLogger(__name__)

_DEFAULT_PROBABILITIES = (0.3, 0.3, 0.3, 0.05, 0.05)
_UPDATE_EVERY = 100
_TIMEOUT_CHECK_EVERY = 10
_STATS_EVERY_STEPS = 5


class Placement(Protocol):
    """What the annealer needs from a placement representation."""

    @property
    def modules(self) -> Mapping[str, object]:
        """Modules by name."""

    @property
    def symmetry_groups(self) -> Sequence[SymmetryGroup]:
        """Symmetry groups in the design."""

    @property
    def area(self) -> int:
        """Bounding area of the packed placement."""

    @property
    def wire_length(self) -> int:
        """Total wire length of the packed placement."""

    def pack(self) -> bool:
        """Compute coordinates for all modules."""

    def clone(self) -> "Placement":
        """Return an independent deep copy."""

    def rotate_module(self, module_name: str) -> bool:
        """Rotate a module; report whether anything changed."""

    def move_node(self, node_name: str, new_parent_name: str, as_left_child: bool) -> bool:
        """Move a node under a new parent."""

    def swap_nodes(self, node_name1: str, node_name2: str) -> bool:
        """Swap two nodes."""

    def change_representative(self, group_name: str, module_name: str) -> bool:
        """Change the representative of a symmetry pair."""

    def convert_symmetry_type(self, group_name: str) -> bool:
        """Toggle the symmetry type of a group."""


class SimulatedAnnealing:
    """Anneals a placement, keeping the best solution seen."""

    def __init__(
        self,
        initial_solution: Placement,
        initial_temp: float = 1000.0,
        final_temp: float = 0.1,
        cooling_rate: float = 0.95,
        iterations: int = 100,
        no_improvement_limit: int = 1000,
    ) -> None:
        self.initial_temperature = initial_temp
        self.final_temperature = final_temp
        self.cooling_rate = cooling_rate
        self.iterations_per_temperature = iterations
        self.no_improvement_limit = no_improvement_limit
        self.timeout_manager: Optional[TimeoutManager] = None
        self.adaptive = AdaptivePerturbation(*_DEFAULT_PROBABILITIES)

        self._rng = random.Random(int(time.time()))
        self._probabilities: tuple[float, ...] = _DEFAULT_PROBABILITIES
        self.area_weight = 1.0
        self.wirelength_weight = 0.0

        self._total_iterations = 0
        self._accepted_moves = 0
        self._rejected_moves = 0
        self._no_improvement_count = 0
        self._temperature_steps = 0
        self._last_operation: Optional[Operation] = None

        self._current = initial_solution
        self._current.pack()
        self._current_cost = self._cost(self._current)
        self._best = self._current.clone()
        self._best_cost = self._current_cost

    # -- configuration --------------------------------------------------

    @property
    def probabilities(self) -> dict[Operation, float]:
        """Configured perturbation probabilities, normalised."""
        return dict(zip(Operation, self._probabilities))

    def set_perturbation_probabilities(
        self,
        rotate: float,
        move: float,
        swap: float,
        change_rep: float,
        convert_sym: float,
    ) -> None:
        """Store probabilities scaled to sum to one; defaults if the sum is not positive."""
        values = (rotate, move, swap, change_rep, convert_sym)
        total = sum(values)
        if total <= 0.0:
            self._probabilities = _DEFAULT_PROBABILITIES
        else:
            self._probabilities = tuple(v / total for v in values)

    def set_cost_weights(self, area: float, wirelength: float) -> None:
        self.area_weight = area
        self.wirelength_weight = wirelength

    def seed(self, seed: int) -> None:
        """Reseed the random generator for reproducible runs."""
        self._rng.seed(seed)

    # -- results --------------------------------------------------------

    @property
    def best_solution(self) -> Placement:
        return self._best

    @property
    def best_cost(self) -> int:
        return self._best_cost

    @property
    def current_cost(self) -> int:
        return self._current_cost

    def statistics(self) -> dict[str, int]:
        return {
            "totalIterations": self._total_iterations,
            "acceptedMoves": self._accepted_moves,
            "rejectedMoves": self._rejected_moves,
            "noImprovementCount": self._no_improvement_count,
        }

    # -- internals ------------------------------------------------------

    def _cost(self, solution: Placement) -> int:
        return int(
            self.area_weight * solution.area
            + self.wirelength_weight * solution.wire_length
        )

    def _timed_out(self) -> bool:
        return self.timeout_manager is not None and self.timeout_manager.timed_out

    def _choose_operation(self) -> Operation:
        draw = self._rng.random()
        cumulative = 0.0
        operations = list(Operation)
        for op in operations[:-1]:
            cumulative += self.adaptive.probability(op)
            if draw < cumulative:
                return op
        return operations[-1]

    def _perturb(self) -> bool:
        if self._timed_out():
            raise PlacementTimeout("Timeout during perturbation")
        op = self._choose_operation()
        self._last_operation = op
        self.adaptive.record_attempt(op)
        handlers = {
            Operation.ROTATE: self._perturb_rotate,
            Operation.MOVE: self._perturb_move,
            Operation.SWAP: self._perturb_swap,
            Operation.CHANGE_REP: self._perturb_change_representative,
            Operation.CONVERT_SYM: self._perturb_convert_symmetry_type,
        }
        return handlers[op]()

    def _perturb_rotate(self) -> bool:
        name = self._random_module()
        return bool(name) and self._current.rotate_module(name)

    def _perturb_move(self) -> bool:
        node = self._random_node()
        parent = self._random_node()
        if not node or not parent or node == parent:
            return False
        as_left = self._rng.random() < 0.5
        return self._current.move_node(node, parent, as_left)

    def _perturb_swap(self) -> bool:
        first = self._random_node()
        second = self._random_node()
        if not first or not second or first == second:
            return False
        return self._current.swap_nodes(first, second)

    def _perturb_change_representative(self) -> bool:
        group_name = self._random_group()
        if not group_name:
            return False
        group = next(
            (g for g in self._current.symmetry_groups if g.name == group_name), None
        )
        if group is None or not group.symmetry_pairs:
            return False
        pair = self._rng.choice(group.symmetry_pairs)
        module = pair[0] if self._rng.random() < 0.5 else pair[1]
        return self._current.change_representative(group_name, module)

    def _perturb_convert_symmetry_type(self) -> bool:
        group_name = self._random_group()
        return bool(group_name) and self._current.convert_symmetry_type(group_name)

    def _random_module(self) -> str:
        names = sorted(self._current.modules)
        return self._rng.choice(names) if names else ""

    def _random_group(self) -> str:
        groups = self._current.symmetry_groups
        return self._rng.choice(list(groups)).name if groups else ""

    def _random_node(self) -> str:
        names = sorted(self._current.modules)
        names.extend(g.name for g in self._current.symmetry_groups)
        return self._rng.choice(names) if names else ""

    def _accept(self, cost_difference: int, temperature: float) -> bool:
        if cost_difference <= 0:
            return True
        return self._rng.random() < math.exp(-cost_difference / temperature)

    def _iterate(self, temperature: float) -> None:
        saved = self._current.clone()
        if not self._perturb():
            return
        self._current.pack()
        new_cost = self._cost(self._current)
        difference = new_cost - self._current_cost
        if self._accept(difference, temperature):
            self._current_cost = new_cost
            self._accepted_moves += 1
            if difference < 0 and self._last_operation is not None:
                self.adaptive.record_success(self._last_operation, -difference)
            if new_cost < self._best_cost:
                self._best = self._current.clone()
                self._best_cost = new_cost
                self._no_improvement_count = 0
            else:
                self._no_improvement_count += 1
        else:
            self._current = saved
            self._rejected_moves += 1
            self._no_improvement_count += 1

        self._total_iterations += 1
        if self._total_iterations % _UPDATE_EVERY == 0:
            self.adaptive.update_probabilities()

    def _anneal(self) -> Placement:
        temperature = self.initial_temperature
        while (
            temperature > self.final_temperature
            and self._no_improvement_count < self.no_improvement_limit
        ):
            if self._timed_out():
                logger.info(
                    "Timeout detected at temperature %g. Returning best solution so far.",
                    temperature,
                )
                return self._best

            for i in range(self.iterations_per_temperature):
                if i % _TIMEOUT_CHECK_EVERY == 0 and self._timed_out():
                    logger.info(
                        "Timeout detected during iteration %d at temperature %g.",
                        i,
                        temperature,
                    )
                    return self._best
                try:
                    self._iterate(temperature)
                except PlacementTimeout:
                    return self._best

            if self._timed_out():
                logger.info(
                    "Timeout detected after completing temperature %g.", temperature
                )
                return self._best

            temperature *= self.cooling_rate
            self._temperature_steps += 1
            logger.info(
                "Temperature: %g, Best cost: %d, Current cost: %d, No improvement: %d",
                temperature,
                self._best_cost,
                self._current_cost,
                self._no_improvement_count,
            )
            if self._temperature_steps % _STATS_EVERY_STEPS == 0:
                logger.info("%s", self.adaptive.format_stats().rstrip("\n"))
        return self._best

    def run(self) -> Placement:
        """Anneal and return the best solution found.

        A timeout or an unexpected error ends the run early; the best
        solution seen so far is returned in either case.
        """
        self._total_iterations = 0
        self._accepted_moves = 0
        self._rejected_moves = 0
        self._no_improvement_count = 0
        try:
            return self._anneal()
        except Exception:  # the best solution so far is still usable
            logger.exception("Annealing stopped; returning best solution found so far.")
            return self._best