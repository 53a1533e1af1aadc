# keyboard_and_plugboard.py
from __future__ import annotations

from collections.abc import Sequence
from debug import Debug
from errors import ConfigurationError

debug = Debug()

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

PairSpec = str | Sequence[str | tuple[str, str]]


def fold(ch: str) -> str:
    """Upper-case an ASCII character; anything else is returned as is."""
    return ch.upper() if ch.isascii() else ch


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    def __init__(self, alphabet: str = ALPHABET) -> None:
        if len(set(alphabet)) != len(alphabet):
            raise ConfigurationError("Alphabet symbols must be unique")
        self.alphabet: str = alphabet
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(alphabet)
        }

    def __contains__(self, letter: str) -> bool:
        return letter in self.alpha_to_index

    # letter → integer signal
    def forward(self, letter: str) -> int:
        try:
            return self.alpha_to_index[letter]
        except KeyError:
            raise ValueError(
                f"Invalid character {letter!r} for current alphabet."
            )

    # integer signal → letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < len(self.alphabet)):
            hi = len(self.alphabet) - 1
            raise ValueError(f"Signal {signal} out of range 0–{hi}")
        return self.alphabet[signal]


def split_pairs(pairs: PairSpec) -> list[tuple[str, str]]:
    """Normalise ``"AZBY"``, ``"AZ BY"``, ``["AZ", "BY"]`` or tuples to
    upper-case ``(a, b)`` tuples."""
    if isinstance(pairs, str):
        text = pairs.upper()
        if any(ch.isspace() for ch in text):
            chunks: list = text.split()
        else:
            if len(text) % 2:
                raise ConfigurationError(
                    f"Pairing string {pairs!r} has odd length {len(text)}"
                )
            chunks = [text[i:i + 2] for i in range(0, len(text), 2)]
    else:
        chunks = list(pairs)

    out: list[tuple[str, str]] = []
    for raw in chunks:
        if isinstance(raw, str):
            if len(raw) != 2:
                raise ConfigurationError(f"Pair {raw!r} must be exactly 2 symbols")
            a, b = raw.upper()
        else:
            a, b = raw
            a, b = a.upper(), b.upper()
        out.append((a, b))
    return out


# ── PairSubstitution ──────────────────────────────────────────────
class PairSubstitution:
    """Symmetric pairing over the alphabet, stored as 26 partner indices.

    ``partners[i] == j`` and ``partners[j] == i`` for every pair; unpaired
    symbols are their own partner.
    """

    kind = "pairing"

    def __init__(self, pairs: PairSpec = "", alphabet: str = ALPHABET) -> None:
        self.alphabet: str = alphabet
        self.size = len(alphabet)
        index = {ch: i for i, ch in enumerate(alphabet)}
        partners = list(range(self.size))
        used: set[str] = set()

        for a, b in split_pairs(pairs):
            if a not in index or b not in index:
                bad = a if a not in index else b
                raise ConfigurationError(f"Symbol {bad!r} not in alphabet")
            if a == b:
                raise ConfigurationError(
                    f"{self.kind.capitalize()} cannot map a symbol to itself: {a}"
                )
            if a in used or b in used:
                dup = a if a in used else b
                raise ConfigurationError(f"Character {dup!r} already used in {self.kind}")

            ia, ib = index[a], index[b]
            partners[ia], partners[ib] = ib, ia
            used.update((a, b))

        self.partners: tuple[int, ...] = tuple(partners)

    @property
    def pair_count(self) -> int:
        return sum(1 for i, j in enumerate(self.partners) if i < j)

    @property
    def is_complete(self) -> bool:
        return all(i != j for i, j in enumerate(self.partners))

    def partner(self, letter: str) -> str | None:
        """Partner of *letter*, or None when it is unpaired."""
        i = self.alphabet.index(letter)
        j = self.partners[i]
        return None if i == j else self.alphabet[j]

    def pairs(self) -> list[str]:
        return [
            self.alphabet[i] + self.alphabet[j]
            for i, j in enumerate(self.partners)
            if i < j
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PairSubstitution):
            return NotImplemented
        return self.alphabet == other.alphabet and self.partners == other.partners

    def __hash__(self) -> int:
        return hash((self.alphabet, self.partners))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {' '.join(self.pairs())}>"


# ── Plugboard ─────────────────────────────────────────────────────
class Plugboard(PairSubstitution):
    kind = "plugboard"

    def _map(self, signal: int) -> int:
        mapped = self.partners[signal]
        if debug.is_on("plugboard"):
            debug.log("plugboard", "%s->%s", self.alphabet[signal], self.alphabet[mapped])
        return mapped

    forward = _map        # alias: signal in
    backward = _map       # alias: signal out
