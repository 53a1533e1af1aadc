# settings_generator.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
from random import Random, SystemRandom
from typing import Dict, List, Sequence

from keyboard_and_plugboard import ALPHABET
from utilities import REFLECTORS, ROTORS, build_rng

MAX_PAIRS = 10

# ── helpers ───────────────────────────────────────────────────────


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def make_key_sheet(
    rng: Random | SystemRandom,
    *,
    rotors: Sequence[str] = tuple(ROTORS),
    reflectors: Sequence[str] = tuple(REFLECTORS),
    pairs: int = MAX_PAIRS,
) -> Dict:
    """Random settings in the layout `main.load_config` reads."""
    return {
        "rotors": rng.sample(list(rotors), 3),
        "reflector": rng.choice(list(reflectors)),
        "ring_set": [rng.randint(1, len(ALPHABET)) for _ in range(3)],
        "plugs": choose_pairs(ALPHABET, pairs, rng),
        "master_key": "".join(rng.choices(ALPHABET, k=3)),
    }


def parse_cli(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a machine key sheet")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=MAX_PAIRS, help="Plugboard pairs. Default: %(default)s")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("key_sheet.json"),
        help="Destination JSON file (default: key_sheet.json)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_cli(argv)
    rng = build_rng(args.seed)
    cfg = make_key_sheet(rng, pairs=args.pairs)

    args.outfile.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    print(f"✅  Wrote {args.outfile}\n"
        f"   rotors      : {cfg['rotors']}\n"
        f"   reflector   : {cfg['reflector']}\n"
        f"   ring set    : {cfg['ring_set']}\n"
        f"   master key  : {cfg['master_key']}\n"
        f"   plug pairs  : {len(cfg['plugs'])}")


if __name__ == "__main__":
    main()
