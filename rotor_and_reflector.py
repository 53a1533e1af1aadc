# rotor_and_reflector.py
from __future__ import annotations

import copy

from debug import Debug
from errors import ConfigurationError
from keyboard_and_plugboard import ALPHABET, PairSpec, PairSubstitution

debug = Debug()


class Rotor:
    def __init__(
        self,
        wiring: str,
        notches: str,
        alphabet: str = ALPHABET,
        *,
        position: int = 0,
        ring: int = 0,
    ) -> None:
        if len(wiring) != len(alphabet) or sorted(wiring) != sorted(alphabet):
            raise ConfigurationError(f"wiring {wiring!r} must be a permutation of alphabet")
        if not set(notches) <= set(alphabet):
            raise ConfigurationError("Notch characters must be in the alphabet")

        self.alphabet = alphabet
        self.size = len(alphabet)
        self.wiring = wiring

        # integer lookup tables, shared by copies
        self._fwd = tuple(alphabet.index(c) for c in wiring)
        self._rev = tuple(wiring.index(c) for c in alphabet)

        self.notches = frozenset(alphabet.index(c) for c in notches)
        self.position = position % self.size
        self.ring = ring % self.size

    # ── copies for a fresh machine ───────────────────────────────
    def at(self, position: int = 0, ring: int = 0) -> "Rotor":
        """Return a copy sharing the wiring tables, set to *position*/*ring*."""
        rotor = copy.copy(self)
        rotor.position = position % self.size
        rotor.ring = ring % self.size
        debug.log("rotor", "%r", rotor)
        return rotor

    # ── window & notch helpers ────────────────────────────────────
    @property
    def window(self) -> str:
        return self.alphabet[self.position]

    @property
    def notch_letters(self) -> str:
        return "".join(self.alphabet[i] for i in sorted(self.notches))

    def at_notch(self) -> bool:
        return self.position in self.notches

    # ── stepping --------------------------------------------------
    def step(self) -> None:
        self.position = (self.position + 1) % self.size

    # ── signal paths ---------------------------------------------
    def forward(self, sig: int) -> int:
        return self._fwd[(sig + self.position + self.ring) % self.size]

    def backward(self, sig: int) -> int:
        return (self._rev[sig] - self.position - self.ring) % self.size

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor pos={self.window} ring={self.ring} notch={self.notch_letters}>"


class Reflector(PairSubstitution):
    """A pairing that leaves no symbol unpaired."""

    kind = "reflector"

    def __init__(self, pairs: PairSpec, alphabet: str = ALPHABET) -> None:
        super().__init__(pairs, alphabet)
        if not self.is_complete:
            loose = "".join(
                self.alphabet[i] for i, j in enumerate(self.partners) if i == j
            )
            raise ConfigurationError(
                f"Reflector must pair every symbol; unpaired: {loose}"
            )

    def reflect(self, sig: int) -> int:
        mapped = self.partners[sig]
        if debug.is_on("reflector"):
            debug.log("reflector", "%s->%s", self.alphabet[sig], self.alphabet[mapped])
        return mapped
