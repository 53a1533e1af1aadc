# exhaustive_search.py
from __future__ import annotations

import concurrent.futures
from typing import Callable, Optional, Tuple

from config_space import (
    Candidate,
    Configuration,
    Evaluator,
    Scorer,
    SearchResult,
    SearchSpace,
    Triple,
)
from debug import Debug
from fitness import fitness
from keyboard_and_plugboard import PairSpec
from utilities import DEFAULT_PLUGBOARD, DEFAULT_REFLECTOR

debug = Debug()

PROGRESS_EVERY = 100_000

ProgressCallback = Callable[[int, int], None]


def _log_progress(checked: int, total: int) -> None:
    debug.log("progress", "%d/%d configurations checked (%.1f%%)",
              checked, total, 100.0 * checked / total if total else 100.0)


def _keep_best(best: Optional[Candidate], candidate: Candidate) -> Candidate:
    # strict comparison: the first of equal scores stays
    if best is None or candidate.score > best.score:
        return candidate
    return best


def _search_triple(evaluate: Evaluator, space: SearchSpace, triple: Triple) -> Tuple[Optional[Candidate], int]:
    """Worker job: every start position for one rotor order."""
    best: Optional[Candidate] = None
    checked = 0
    for config in space.configurations_for(triple):
        best = _keep_best(best, evaluate(config))
        checked += 1
    return best, checked


class ExhaustiveSearch:
    """Try every configuration in a :class:`SearchSpace` exactly once.

    The result is the global optimum of the scorer over the space. With
    ``workers > 1`` rotor orders are fanned out to a process pool and the
    per-order winners are merged in enumeration order, so the outcome is
    the same as the serial run.
    """

    def __init__(
        self,
        space: SearchSpace | None = None,
        *,
        plugboard: PairSpec = DEFAULT_PLUGBOARD,
        reflector: PairSpec = DEFAULT_REFLECTOR,
        progress_every: int = PROGRESS_EVERY,
        on_progress: ProgressCallback | None = None,
        workers: int = 1,
        scorer: Scorer = fitness,
    ) -> None:
        if progress_every <= 0:
            raise ValueError("progress_every must be positive")
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.space = space or SearchSpace()
        self.plugboard = plugboard
        self.reflector = reflector
        self.progress_every = progress_every
        self.on_progress = on_progress or _log_progress
        self.workers = workers
        self.scorer = scorer

    def run(self, ciphertext: str) -> SearchResult:
        evaluate = Evaluator(
            ciphertext, self.space.catalog, self.plugboard, self.reflector, self.scorer
        )
        debug.log("search", "exhaustive search over %d configurations", self.space.size)
        if self.workers == 1:
            best, checked = self._run_serial(evaluate)
        else:
            best, checked = self._run_parallel(evaluate)

        debug.log("search", "best %s score=%.4f", best.configuration, best.score)
        return SearchResult.from_candidate(best, checked)

    def _run_serial(self, evaluate: Evaluator) -> Tuple[Candidate, int]:
        total = self.space.size
        best: Optional[Candidate] = None
        checked = 0
        for config in self.space:
            best = _keep_best(best, evaluate(config))
            checked += 1
            if checked % self.progress_every == 0:
                self.on_progress(checked, total)
        return best, checked

    def _run_parallel(self, evaluate: Evaluator) -> Tuple[Candidate, int]:
        total = self.space.size
        triples = list(self.space.triples())
        best: Optional[Candidate] = None
        checked = 0
        next_report = self.progress_every

        with concurrent.futures.ProcessPoolExecutor(max_workers=self.workers) as ex:
            futs = [ex.submit(_search_triple, evaluate, self.space, t) for t in triples]
            # merge in submission order so ties resolve as in the serial run
            for fut in futs:
                triple_best, triple_checked = fut.result()
                checked += triple_checked
                if triple_best is not None:
                    best = _keep_best(best, triple_best)
                if checked >= next_report:
                    self.on_progress(checked, total)
                    next_report = (checked // self.progress_every + 1) * self.progress_every
        return best, checked


def exhaustive_search(ciphertext: str, **options) -> Configuration:
    """Highest-scoring configuration over the whole search space."""
    return ExhaustiveSearch(**options).run(ciphertext).configuration
