# main.py
from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from cipher_engine import CipherEngine
from config_space import Configuration, SearchResult, SearchSpace
from debug import COMPONENTS, Debug
from errors import ConfigurationError
from exhaustive_search import PROGRESS_EVERY, ExhaustiveSearch
from fitness import analyze
from hill_climb import STAGNATION_LIMIT, HillClimber
from keyboard_and_plugboard import ALPHABET
from utilities import (
    ALL_ROTORS,
    DEFAULT_PLUGBOARD,
    DEFAULT_REFLECTOR,
    ROTORS,
    blocks,
    build_rng,
    catalog_subset,
    clean_text,
    parse_window,
    resolve_reflector,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class AttackConfig:
    """Runtime switches for the search commands."""

    iterations: int = 1000                  # hill-climb budget
    stagnation_limit: int = STAGNATION_LIMIT
    seed: int | None = None                 # None → system RNG
    workers: int = 1                        # exhaustive search processes
    progress_every: int = PROGRESS_EVERY
    letters: str = ALPHABET                 # start letters to search
    rotors: tuple[str, ...] = tuple(ROTORS)
    plugboard: str = DEFAULT_PLUGBOARD
    reflector: str = DEFAULT_REFLECTOR

    def space(self) -> SearchSpace:
        return SearchSpace(catalog_subset(self.rotors), self.letters)


# ────────────────────────────────────────────────────────────────────────
#  1. Key sheet (JSON) loading helpers
# ────────────────────────────────────────────────────────────────────────


def load_config(path: str | Path) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    required = {"rotors", "reflector", "ring_set", "plugs", "master_key"}
    missing = required - data.keys()
    if missing:
        raise ValueError(f"Missing keys in config: {', '.join(sorted(missing))}")
    return data


def engine_from_config(cfg: dict) -> CipherEngine:
    """Build a machine from a key sheet dictionary."""
    rotor_labels = [name.upper() for name in cfg["rotors"]]
    rings = [(int(r) - 1) % len(ALPHABET) for r in cfg["ring_set"]]
    config = Configuration(
        tuple(rotor_labels),
        parse_window(cfg["master_key"]),
        tuple(rings),
    )
    return config.build_engine(
        catalog_subset(rotor_labels),
        cfg["plugs"],
        resolve_reflector(cfg["reflector"]),
    )


def engine_from_args(args: argparse.Namespace) -> CipherEngine:
    if args.config:
        return engine_from_config(load_config(args.config))

    rotor_labels = [name.upper() for name in args.rotors]
    config = Configuration(
        tuple(rotor_labels),
        parse_window(args.positions),
        parse_window(args.rings),
    )
    return config.build_engine(
        catalog_subset(rotor_labels),
        args.plugboard,
        resolve_reflector(args.reflector),
    )


# ────────────────────────────────────────────────────────────────────────
#  2. Commands
# ────────────────────────────────────────────────────────────────────────


def cmd_process(args: argparse.Namespace) -> None:
    engine = engine_from_args(args)
    out = engine.process(args.text)
    print(blocks(clean_text(out)) if args.blocks else out)


def cmd_analyze(args: argparse.Namespace) -> None:
    stats = analyze(args.text)
    print(f"Letters:         {stats.letters}")
    print(f"IoC:             {stats.ioc:.4f}")
    print(f"Frequency score: {stats.chi_square:.4f}")
    print(f"Trigram count:   {stats.trigrams}")
    print(f"Fitness:         {stats.fitness:.4f}")


def _report(label: str, result: SearchResult, elapsed: float) -> None:
    print(f"\n{label} best configuration:")
    print(result.configuration)
    print(f"{label} decryption: {result.plaintext}")
    print(f"{label} fitness: {result.score:.4f}")
    print(f"{result.evaluations} evaluations in {elapsed:.2f}s"
          + (f", {result.restarts} restarts" if result.restarts else ""))


def attack_config(args: argparse.Namespace) -> AttackConfig:
    return AttackConfig(
        iterations=getattr(args, "iterations", 1000),
        stagnation_limit=getattr(args, "stagnation_limit", STAGNATION_LIMIT),
        seed=getattr(args, "seed", None),
        workers=getattr(args, "workers", 1),
        progress_every=getattr(args, "progress_every", PROGRESS_EVERY),
        letters=args.letters.upper(),
        rotors=tuple(name.upper() for name in args.catalog),
        plugboard=args.plugboard,
        reflector=resolve_reflector(args.reflector),
    )


def cmd_hillclimb(args: argparse.Namespace) -> None:
    cfg = attack_config(args)
    climber = HillClimber(
        cfg.space(),
        plugboard=cfg.plugboard,
        reflector=cfg.reflector,
        stagnation_limit=cfg.stagnation_limit,
        rng=build_rng(cfg.seed),
    )
    tick = time.time()
    result = climber.run(args.text, cfg.iterations)
    _report("Hill climb", result, time.time() - tick)


def cmd_exhaustive(args: argparse.Namespace) -> None:
    cfg = attack_config(args)
    search = ExhaustiveSearch(
        cfg.space(),
        plugboard=cfg.plugboard,
        reflector=cfg.reflector,
        progress_every=cfg.progress_every,
        workers=cfg.workers,
    )
    print(f"Starting exhaustive search... ({search.space.size} combinations)")
    tick = time.time()
    result = search.run(args.text)
    _report("Exhaustive search", result, time.time() - tick)


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def _add_machine_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--plugboard", default=DEFAULT_PLUGBOARD, help="Plug pairs, e.g. AZBYCX or 'AZ BY CX'. Default: %(default)s")
    p.add_argument("--reflector", default="B", help="Reflector name (B, C) or a 26-letter pair string. Default: B")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Three-rotor machine and ciphertext-only attack")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every component (very noisy).")
    p.add_argument("-q", "--quiet", action="store_true", help="Switch logging off.")
    sub = p.add_subparsers(dest="command", required=True)

    for name in ("encrypt", "decrypt"):
        sp = sub.add_parser(name, help=f"{name.capitalize()} a message")
        sp.add_argument("text", help="Message; non-letters pass through unchanged")
        sp.add_argument("--config", metavar="FILE", help="Load machine settings from a JSON key sheet.")
        sp.add_argument("--rotors", nargs=3, default=["I", "II", "III"], metavar="NAME", help="Rotors left to right. Default: I II III")
        sp.add_argument("--positions", default="AAA", help="Start letters left to right. Default: AAA")
        sp.add_argument("--rings", default="AAA", help="Ring settings as letters. Default: AAA")
        sp.add_argument("--blocks", action="store_true", help="Print letters only, in groups of five.")
        _add_machine_args(sp)
        sp.set_defaults(func=cmd_process)

    sp = sub.add_parser("analyze", help="Print the fitness statistics of a text")
    sp.add_argument("text")
    sp.set_defaults(func=cmd_analyze)

    for name, func in (("hillclimb", cmd_hillclimb), ("exhaustive", cmd_exhaustive)):
        sp = sub.add_parser(name, help=f"Recover rotor order and start positions ({name})")
        sp.add_argument("text", help="Ciphertext")
        sp.add_argument("--catalog", nargs="+", default=list(ROTORS), metavar="NAME",
                        help=f"Rotors to search, from {' '.join(ALL_ROTORS)}. Default: I-V")
        sp.add_argument("--letters", default=ALPHABET, help="Start letters to try. Default: A-Z")
        _add_machine_args(sp)
        sp.set_defaults(func=func)
        if name == "hillclimb":
            sp.add_argument("-n", "--iterations", type=int, default=1000, help="Iteration budget. Default: %(default)s")
            sp.add_argument("--stagnation-limit", type=int, default=STAGNATION_LIMIT, help="Restart after this many idle iterations. Default: %(default)s")
            sp.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
        else:
            sp.add_argument("-j", "--workers", type=int, default=1, help="Worker processes. Default: %(default)s")
            sp.add_argument("--progress-every", type=int, default=PROGRESS_EVERY, help="Progress interval. Default: %(default)s")

    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    debug.toggle_global(not args.quiet)
    if args.verbose:
        debug.enable(*COMPONENTS)
    else:
        debug.enable("search", "progress")

    try:
        args.func(args)
    except (ConfigurationError, ValueError) as e:
        sys.exit(f"❌  {e}")
    except OSError as e:
        sys.exit(f"Failed to load configuration: {e}")


if __name__ == "__main__":
    main()
