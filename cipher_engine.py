# cipher_engine.py  ─────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Sequence

from debug import Debug
from errors import ConfigurationError
from keyboard_and_plugboard import ALPHABET, Keyboard, PairSpec, Plugboard, fold
from rotor_and_reflector import Reflector, Rotor

debug = Debug()

ROTOR_COUNT = 3


def _to_index(value: int | str, alphabet: str) -> int:
    """Accept a window letter or an integer offset."""
    if isinstance(value, str):
        letter = value.upper()
        if len(letter) != 1 or letter not in alphabet:
            raise ConfigurationError(f"{value!r} is not a letter of the alphabet")
        return alphabet.index(letter)
    return int(value) % len(alphabet)


class CipherEngine:
    """Three-rotor machine: plugboard, rotor stack, reflector.

    Rotors are held left → right. The machine is stateful; every letter
    advances the rotors, so call :meth:`reset` before processing another
    message with the same settings.
    """

    def __init__(
        self,
        rotors: Sequence[Rotor],
        plugboard: Plugboard,
        reflector: Reflector,
        keyboard: Keyboard | None = None,
    ) -> None:
        if len(rotors) != ROTOR_COUNT:
            raise ConfigurationError(
                f"Expected {ROTOR_COUNT} rotors, got {len(rotors)}"
            )
        alphabet = rotors[0].alphabet
        if any(r.alphabet != alphabet for r in rotors) or plugboard.alphabet != alphabet \
                or reflector.alphabet != alphabet:
            raise ConfigurationError("Rotors, plugboard and reflector must share one alphabet")

        self.kb = keyboard or Keyboard(alphabet)
        self.pb = plugboard
        self.rotors = list(rotors)
        self.reflector = reflector
        self.start_positions: tuple[int, ...] = self.positions

    @classmethod
    def from_settings(
        cls,
        wirings: Sequence[str],
        notches: Sequence[str],
        positions: Sequence[int | str] = (0, 0, 0),
        rings: Sequence[int | str] | None = None,
        plugboard: PairSpec = "",
        reflector: PairSpec = "",
        alphabet: str = ALPHABET,
    ) -> "CipherEngine":
        """Build a machine from raw wiring strings and pair strings."""
        rings = rings if rings is not None else [0] * len(wirings)
        if not (len(wirings) == len(notches) == len(positions) == len(rings)):
            raise ConfigurationError("wirings, notches, positions and rings must have equal length")

        rotors = [
            Rotor(
                wiring.upper(),
                notch.upper(),
                alphabet,
                position=_to_index(pos, alphabet),
                ring=_to_index(ring, alphabet),
            )
            for wiring, notch, pos, ring in zip(wirings, notches, positions, rings)
        ]
        return cls(rotors, Plugboard(plugboard, alphabet), Reflector(reflector, alphabet))

    # ── key helpers ─────────────────────────────────────────────

    @property
    def positions(self) -> tuple[int, ...]:
        return tuple(r.position for r in self.rotors)

    @property
    def window(self) -> str:
        """Letters currently visible in the rotor windows, left → right."""
        return "".join(r.window for r in self.rotors)

    def set_positions(self, *positions: int | str) -> None:
        """Rotate each rotor to a start position and remember it for reset()."""
        if len(positions) == 1 and isinstance(positions[0], str) and len(positions[0]) > 1:
            positions = tuple(positions[0])
        if len(positions) != len(self.rotors):
            raise ConfigurationError(
                f"Expected {len(self.rotors)} positions, got {len(positions)}"
            )
        for rotor, value in zip(self.rotors, positions):
            rotor.position = _to_index(value, rotor.alphabet)
        self.start_positions = self.positions

    def reset(self) -> None:
        """Return the rotors to the start positions."""
        for rotor, pos in zip(self.rotors, self.start_positions):
            rotor.position = pos

    # ── stepping logic  ─────────────────────────────────────────

    def step(self) -> None:
        """Advance rotors for one key-press (historic double-step)."""
        left, middle, right = self.rotors

        # notch checks are made before anything moves
        step_L = middle.at_notch()
        step_M = step_L or right.at_notch()

        if step_L:
            left.step()
        if step_M:
            middle.step()
        right.step()

        if debug.is_on("stepping"):
            debug.log("stepping", "window %s", self.window)

    # ── encipher one symbol  ────────────────────────────────────

    def encipher(self, letter: str) -> str:
        signal = self.kb.forward(letter)
        signal = self.pb.forward(signal)

        self.step()

        for rotor in reversed(self.rotors):
            signal = rotor.forward(signal)

        signal = self.reflector.reflect(signal)

        for rotor in self.rotors:
            signal = rotor.backward(signal)

        signal = self.pb.backward(signal)
        out_ch = self.kb.backward(signal)
        if debug.is_on("encipher"):
            debug.log("encipher", "%s->%s", letter, out_ch)
        return out_ch

    def process(self, text: str) -> str:
        """Encipher letters; anything outside the alphabet passes through
        unchanged and does not move the rotors."""
        kb = self.kb
        out = []
        for ch in text:
            letter = fold(ch)
            out.append(self.encipher(letter) if letter in kb else ch)
        return "".join(out)

    # the machine is its own inverse from matching start positions
    encrypt = process
    decrypt = process

    def __repr__(self) -> str:
        return f"<CipherEngine window={self.window} {self.pb!r} {self.reflector!r}>"
