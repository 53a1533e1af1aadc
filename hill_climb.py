# hill_climb.py
from __future__ import annotations

from enum import Enum
from random import Random

from config_space import (
    Candidate,
    Configuration,
    Evaluator,
    Scorer,
    SearchResult,
    SearchSpace,
)
from debug import Debug
from fitness import fitness
from keyboard_and_plugboard import PairSpec
from utilities import DEFAULT_PLUGBOARD, DEFAULT_REFLECTOR, build_rng

debug = Debug()

STAGNATION_LIMIT = 100


class SearchState(Enum):
    IMPROVING = "improving"
    STAGNATING = "stagnating"
    RESTARTING = "restarting"


def next_state(improved: bool, stagnant: int, limit: int) -> SearchState:
    """Transition on the outcome of one neighbour comparison."""
    if improved:
        return SearchState.IMPROVING
    if stagnant > limit:
        return SearchState.RESTARTING
    return SearchState.STAGNATING


class HillClimber:
    """Greedy local search over a :class:`SearchSpace` with random restarts.

    Each iteration applies one mutation to the current configuration and
    keeps it only if it scores strictly higher. After more than
    ``stagnation_limit`` non-improving iterations in a row the climb is
    abandoned and restarted from a random point. The best candidate seen
    across all restarts is returned.
    """

    def __init__(
        self,
        space: SearchSpace | None = None,
        *,
        plugboard: PairSpec = DEFAULT_PLUGBOARD,
        reflector: PairSpec = DEFAULT_REFLECTOR,
        stagnation_limit: int = STAGNATION_LIMIT,
        rng: Random | None = None,
        scorer: Scorer = fitness,
    ) -> None:
        if stagnation_limit < 0:
            raise ValueError("stagnation_limit must be >= 0")
        self.space = space or SearchSpace()
        self.plugboard = plugboard
        self.reflector = reflector
        self.stagnation_limit = stagnation_limit
        self.rng = rng if rng is not None else build_rng(None)
        self.scorer = scorer
        self.state = SearchState.IMPROVING

    def run(self, ciphertext: str, max_iterations: int) -> SearchResult:
        if max_iterations < 0:
            raise ValueError("max_iterations must be >= 0")

        evaluate = Evaluator(
            ciphertext, self.space.catalog, self.plugboard, self.reflector, self.scorer
        )
        rng = self.rng

        current: Candidate = evaluate(self.space.random(rng))
        best = current
        evaluations, restarts, stagnant = 1, 0, 0
        self.state = SearchState.IMPROVING
        debug.log("search", "start %s score=%.4f", current.configuration, current.score)

        for iteration in range(max_iterations):
            neighbour = evaluate(self.space.mutate(current.configuration, rng))
            evaluations += 1

            improved = neighbour.score > current.score
            stagnant = 0 if improved else stagnant + 1
            self.state = next_state(improved, stagnant, self.stagnation_limit)

            if self.state is SearchState.IMPROVING:
                current = neighbour
                debug.log(
                    "search", "iteration %d: %s score=%.4f",
                    iteration, current.configuration, current.score,
                )
            elif self.state is SearchState.RESTARTING:
                current = evaluate(self.space.random(rng))
                evaluations += 1
                restarts += 1
                stagnant = 0
                debug.log("search", "iteration %d: restart from %s", iteration, current.configuration)

            if current.score > best.score:
                best = current

        debug.log(
            "search", "done: %s score=%.4f (%d evaluations, %d restarts)",
            best.configuration, best.score, evaluations, restarts,
        )
        return SearchResult.from_candidate(best, evaluations, restarts)


def hill_climb(
    ciphertext: str,
    max_iterations: int,
    *,
    seed: int | None = None,
    rng: Random | None = None,
    **options,
) -> Configuration:
    """Best configuration found by one hill-climbing run."""
    climber = HillClimber(rng=rng if rng is not None else build_rng(seed), **options)
    return climber.run(ciphertext, max_iterations).configuration
