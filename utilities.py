# utilities.py
from __future__ import annotations

import re
from random import Random, SystemRandom
from typing import Dict, Mapping

from errors import ConfigurationError
from keyboard_and_plugboard import ALPHABET, fold
from rotor_and_reflector import Rotor

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_roman_re = re.compile(r"^[IVX]+$")
_ROMAN = {"I": 1, "V": 5, "X": 10}


def _nat_key(name: str):
    """Sort rotor names so I, II, III, IV, … come out in numeric order."""
    if _roman_re.match(name):
        total, prev = 0, 0
        for ch in reversed(name):
            val = _ROMAN[ch]
            total = total - val if val < prev else total + val
            prev = max(prev, val)
        return (0, total, name)
    return (1, 0, name)


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


# ────────────────────────────────────────────────────────────────────────
#  1. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def clean_text(msg: str, alpha: str = ALPHABET) -> str:
    """Upper‑case and drop every character outside *alpha*."""
    return "".join(u for u in map(fold, msg) if u in alpha)


def blocks(text: str, size: int = 5) -> str:
    """Group text for display the way key-sheet traffic is written."""
    return " ".join(text[i : i + size] for i in range(0, len(text), size))


def parse_window(value: str, count: int = 3, alpha: str = ALPHABET) -> tuple[int, ...]:
    """``"ADU"`` → ``(0, 3, 20)``."""
    letters = value.strip().upper()
    if len(letters) != count or not set(letters) <= set(alpha):
        raise ConfigurationError(f"Need exactly {count} letters from the alphabet, got {value!r}")
    return tuple(alpha.index(ch) for ch in letters)


def window_of(positions, alpha: str = ALPHABET) -> str:
    return "".join(alpha[p] for p in positions)


# ────────────────────────────────────────────────────────────────────────
#  2. Wheel database
# ────────────────────────────────────────────────────────────────────────

# Historical rotors ------------------------------------------------------
I   = Rotor("EKMFLGDQVZNTOWYHXUSPAIBRCJ", notches="Q")
II  = Rotor("AJDKSIRUXBLHWTMCQGZNPYFVOE", notches="E")
III = Rotor("BDFHJLCPRTXVZNYEIWGAKMUSQO", notches="V")
IV  = Rotor("ESOVPZJAYQUIRHXLNFTGKDCMWB", notches="J")
V   = Rotor("VZBRGITYUPSDNHLXAWMJQOFECK", notches="Z")
VI  = Rotor("JPGVOUMFYQBENHZRDKASXLICTW", notches="ZM")
VII = Rotor("NZJHGRCXMYSWBOUFAIVLPEKQDT", notches="ZM")
VIII = Rotor("FKQHTLXOCBJSPDZRAMEWNIUYGV", notches="ZM")

# Reflector tables, read as 13 concatenated pairs ------------------------
REFLECTORS: Dict[str, str] = {
    "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
}

DEFAULT_PLUGBOARD = "AZBYCXDWEVFU"
DEFAULT_REFLECTOR = REFLECTORS["B"]

# Build the lookup dicts -------------------------------------------------

ROTORS: Dict[str, Rotor] = {"I": I, "II": II, "III": III, "IV": IV, "V": V}
EXTRA_ROTORS: Dict[str, Rotor] = {"VI": VI, "VII": VII, "VIII": VIII}
ALL_ROTORS: Dict[str, Rotor] = {**ROTORS, **EXTRA_ROTORS}


def catalog_subset(names, catalog: Mapping[str, Rotor] = ALL_ROTORS) -> Dict[str, Rotor]:
    """Pick rotors by name, keeping the requested order."""
    out: Dict[str, Rotor] = {}
    for name in names:
        key = name.upper()
        if key not in catalog:
            raise ConfigurationError(
                f"Unknown rotor {name!r}; expected one of {sorted(catalog, key=_nat_key)}"
            )
        out[key] = catalog[key]
    return out


def resolve_reflector(value: str) -> str:
    """Reflector catalog name (``B``/``C``) or a literal pair string."""
    return REFLECTORS.get(value.upper(), value)


__all__ = [
    "ALL_ROTORS",
    "DEFAULT_PLUGBOARD",
    "DEFAULT_REFLECTOR",
    "EXTRA_ROTORS",
    "REFLECTORS",
    "ROTORS",
    "blocks",
    "build_rng",
    "catalog_subset",
    "clean_text",
    "parse_window",
    "resolve_reflector",
    "window_of",
]
