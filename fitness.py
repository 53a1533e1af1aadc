# fitness.py
"""English-likeness scoring for candidate decryptions."""
from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import List, Tuple

from debug import Debug
from errors import DegenerateInputWarning
from keyboard_and_plugboard import ALPHABET, fold

debug = Debug()

# percent, A..Z
ENGLISH_FREQUENCIES: Tuple[float, ...] = (
    8.2, 1.5, 2.8, 4.3, 13, 2.2, 2.0, 6.1, 7.0, 0.15,
    0.77, 4.0, 2.4, 6.7, 7.5, 1.9, 0.095, 6.0, 6.3, 9.1,
    2.8, 0.98, 2.4, 0.15, 2.0, 0.074,
)

COMMON_TRIGRAMS: Tuple[str, ...] = (
    "THE", "AND", "ING", "ENT", "ION", "HER", "FOR", "THA", "NTH", "INT",
)

ENGLISH_IOC = 0.067

IOC_WEIGHT = 0.4
FREQUENCY_WEIGHT = 0.4
TRIGRAM_WEIGHT = 0.2

_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}


@dataclass(slots=True)
class TextStatistics:
    letters: int
    ioc: float
    chi_square: float
    trigrams: int
    fitness: float


# ── counting helpers ─────────────────────────────────────────────

def letters_only(text: str) -> str:
    """Uppercase and keep only A..Z."""
    return "".join(u for u in map(fold, text) if u in _INDEX)


def letter_counts(letters: str) -> List[int]:
    counts = [0] * len(ALPHABET)
    for ch in letters:
        counts[_INDEX[ch]] += 1
    return counts


def _ioc(counts: List[int], n: int) -> float:
    if n <= 1:
        return 0.0
    return sum(f * (f - 1) for f in counts) / (n * (n - 1))


def _chi_square(counts: List[int], n: int) -> float:
    if n == 0:
        return math.inf
    chi = 0.0
    for observed_count, expected in zip(counts, ENGLISH_FREQUENCIES):
        observed = observed_count / n * 100
        chi += (observed - expected) ** 2 / expected
    return chi


def _trigram_hits(letters: str) -> int:
    count = 0
    for trigram in COMMON_TRIGRAMS:
        index = letters.find(trigram)
        while index != -1:
            count += 1
            index = letters.find(trigram, index + 1)
    return count


def _combine(ioc: float, chi: float, hits: int, n: int) -> float:
    ioc_fitness = 1.0 - abs(ENGLISH_IOC - ioc)
    freq_fitness = 1.0 / (1.0 + chi)
    trigram_fitness = hits / n if n else 0.0
    return (
        IOC_WEIGHT * ioc_fitness
        + FREQUENCY_WEIGHT * freq_fitness
        + TRIGRAM_WEIGHT * trigram_fitness
    )


def _warn_degenerate(text: str) -> None:
    warnings.warn(
        f"no letters to score in {text[:20]!r}; using sentinel values",
        DegenerateInputWarning,
        stacklevel=3,
    )


# ── public API ───────────────────────────────────────────────────

def index_of_coincidence(text: str) -> float:
    """Probability that two letters drawn from *text* are equal (0 for n ≤ 1)."""
    letters = letters_only(text)
    return _ioc(letter_counts(letters), len(letters))


def frequency_score(text: str) -> float:
    """Chi-square against English; ``math.inf`` when there are no letters."""
    letters = letters_only(text)
    return _chi_square(letter_counts(letters), len(letters))


def count_common_trigrams(text: str) -> int:
    """Overlapping occurrences of the common English trigrams."""
    return _trigram_hits(letters_only(text))


def fitness(text: str) -> float:
    letters = letters_only(text)
    n = len(letters)
    if n == 0:
        _warn_degenerate(text)
    counts = letter_counts(letters)
    return _combine(_ioc(counts, n), _chi_square(counts, n), _trigram_hits(letters), n)


def analyze(text: str) -> TextStatistics:
    """All three statistics plus the combined fitness, for reports."""
    letters = letters_only(text)
    n = len(letters)
    if n == 0:
        _warn_degenerate(text)
    counts = letter_counts(letters)
    ioc = _ioc(counts, n)
    chi = _chi_square(counts, n)
    hits = _trigram_hits(letters)
    score = _combine(ioc, chi, hits, n)
    debug.log("fitness", "n=%d ioc=%.4f chi=%.2f trigrams=%d -> %.4f", n, ioc, chi, hits, score)
    return TextStatistics(n, ioc, chi, hits, score)
