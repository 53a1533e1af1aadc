# config_space.py
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from math import perm
from random import Random
from typing import Callable, Dict, Iterator, Mapping, Tuple

from cipher_engine import CipherEngine
from errors import ConfigurationError
from fitness import fitness
from keyboard_and_plugboard import ALPHABET, PairSpec, Plugboard
from rotor_and_reflector import Reflector, Rotor
from utilities import DEFAULT_PLUGBOARD, DEFAULT_REFLECTOR, ROTORS, window_of

Triple = Tuple[str, str, str]
Scorer = Callable[[str], float]


@dataclass(frozen=True)
class Configuration:
    """One point of the search space: rotor order, start positions, rings."""

    rotors: Triple
    positions: Tuple[int, int, int] = (0, 0, 0)
    rings: Tuple[int, int, int] = (0, 0, 0)

    def __post_init__(self) -> None:
        if len(self.rotors) != 3 or len(self.positions) != 3 or len(self.rings) != 3:
            raise ConfigurationError("A configuration needs 3 rotors, 3 positions and 3 rings")
        if len(set(self.rotors)) != 3:
            raise ConfigurationError(f"Rotors must be distinct, got {self.rotors}")
        object.__setattr__(self, "rotors", tuple(self.rotors))
        object.__setattr__(self, "positions", tuple(p % 26 for p in self.positions))
        object.__setattr__(self, "rings", tuple(r % 26 for r in self.rings))

    @property
    def window(self) -> str:
        return window_of(self.positions)

    def build_engine(
        self,
        catalog: Mapping[str, Rotor] = ROTORS,
        plugboard: Plugboard | PairSpec = DEFAULT_PLUGBOARD,
        reflector: Reflector | PairSpec = DEFAULT_REFLECTOR,
    ) -> CipherEngine:
        """A fresh machine set to this configuration's start positions."""
        try:
            protos = [catalog[name] for name in self.rotors]
        except KeyError as exc:
            raise ConfigurationError(f"Rotor {exc.args[0]!r} is not in the catalog") from None
        if not isinstance(plugboard, Plugboard):
            plugboard = Plugboard(plugboard)
        if not isinstance(reflector, Reflector):
            reflector = Reflector(reflector)
        rotors = [p.at(pos, ring) for p, pos, ring in zip(protos, self.positions, self.rings)]
        return CipherEngine(rotors, plugboard, reflector)

    def __str__(self) -> str:
        rings = "" if not any(self.rings) else f", Rings: {'-'.join(window_of(self.rings))}"
        return f"Rotors: {'-'.join(self.rotors)}, Positions: {'-'.join(self.window)}{rings}"


class SearchSpace:
    """Every ordered triple of distinct catalog rotors × start letters.

    Ring settings are held fixed at *rings*.
    """

    def __init__(
        self,
        catalog: Mapping[str, Rotor] = ROTORS,
        letters: str = ALPHABET,
        rings: Tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        if len(catalog) < 3:
            raise ConfigurationError("The rotor catalog needs at least 3 rotors")
        letters = letters.upper()
        if not letters or not set(letters) <= set(ALPHABET) or len(set(letters)) != len(letters):
            raise ConfigurationError(f"Start letters {letters!r} must be distinct alphabet symbols")

        self.catalog: Dict[str, Rotor] = dict(catalog)
        self.names: Tuple[str, ...] = tuple(self.catalog)
        self.letters = letters
        self.offsets: Tuple[int, ...] = tuple(ALPHABET.index(ch) for ch in letters)
        self.rings = tuple(rings)

    @property
    def size(self) -> int:
        return perm(len(self.names), 3) * len(self.offsets) ** 3

    def __len__(self) -> int:
        return self.size

    def __contains__(self, config: object) -> bool:
        return (
            isinstance(config, Configuration)
            and all(name in self.catalog for name in config.rotors)
            and all(p in self.offsets for p in config.positions)
            and config.rings == self.rings
        )

    # ── enumeration ──────────────────────────────────────────────
    def triples(self) -> Iterator[Triple]:
        return itertools.permutations(self.names, 3)

    def configurations_for(self, triple: Triple) -> Iterator[Configuration]:
        for positions in itertools.product(self.offsets, repeat=3):
            yield Configuration(triple, positions, self.rings)

    def __iter__(self) -> Iterator[Configuration]:
        for triple in self.triples():
            yield from self.configurations_for(triple)

    # ── sampling ─────────────────────────────────────────────────
    def random(self, rng: Random) -> Configuration:
        triple = tuple(rng.sample(self.names, 3))
        positions = tuple(rng.choice(self.offsets) for _ in range(3))
        return Configuration(triple, positions, self.rings)

    def mutate(self, config: Configuration, rng: Random) -> Configuration:
        """Apply exactly one random move: swap in a rotor or re-draw a position."""
        rotors = list(config.rotors)
        positions = list(config.positions)
        move = rng.randrange(6)
        if move < 3:
            others = {name for i, name in enumerate(rotors) if i != move}
            choice = rng.choice(self.names)
            while choice in others:
                choice = rng.choice(self.names)
            rotors[move] = choice
        else:
            positions[move - 3] = rng.choice(self.offsets)
        return Configuration(tuple(rotors), tuple(positions), config.rings)

    def __repr__(self) -> str:
        return f"<SearchSpace rotors={'/'.join(self.names)} letters={self.letters} size={self.size}>"


@dataclass(frozen=True)
class Candidate:
    configuration: Configuration
    score: float
    plaintext: str


@dataclass(slots=True)
class SearchResult:
    configuration: Configuration
    score: float
    plaintext: str
    evaluations: int = 0
    restarts: int = 0

    @classmethod
    def from_candidate(cls, best: Candidate, evaluations: int, restarts: int = 0) -> "SearchResult":
        return cls(best.configuration, best.score, best.plaintext, evaluations, restarts)


@dataclass
class Evaluator:
    """Decrypts one ciphertext under many configurations and scores each."""

    ciphertext: str
    catalog: Mapping[str, Rotor] = field(default_factory=lambda: dict(ROTORS))
    plugboard: Plugboard | PairSpec = DEFAULT_PLUGBOARD
    reflector: Reflector | PairSpec = DEFAULT_REFLECTOR
    scorer: Scorer = fitness

    def __post_init__(self) -> None:
        # parse once; both are immutable and safe to share between engines
        if not isinstance(self.plugboard, Plugboard):
            self.plugboard = Plugboard(self.plugboard)
        if not isinstance(self.reflector, Reflector):
            self.reflector = Reflector(self.reflector)

    def decrypt(self, config: Configuration) -> str:
        engine = config.build_engine(self.catalog, self.plugboard, self.reflector)
        return engine.decrypt(self.ciphertext)

    def __call__(self, config: Configuration) -> Candidate:
        plaintext = self.decrypt(config)
        return Candidate(config, self.scorer(plaintext), plaintext)
