# machine.py  ──────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug, silent
from errors import ConfigurationError, SetupError
from rotor_and_reflector import Rotor


class Machine:
    """A complete machine: `num_rotors` slots, `pawls` of them rotating.

    Slot 0 holds the reflector and slot `num_rotors - 1` the fast rotor.
    Rotors are shared with the inventory by reference; the machine only
    arranges them into slots and turns them.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
        debug: Debug | None = None,
    ) -> None:
        if num_rotors < 2:
            raise ConfigurationError(f"Need at least 2 rotor slots, got {num_rotors}")
        if not (0 <= pawls < num_rotors):
            raise ConfigurationError(
                f"Pawl count {pawls} must lie in 0–{num_rotors - 1}"
            )

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self.debug = debug if debug is not None else silent()

        self._inventory: dict[str, Rotor] = {}
        for rotor in all_rotors:
            key = rotor.name.upper()
            if key in self._inventory:
                raise ConfigurationError(f"Rotor {rotor.name!r} defined twice")
            if rotor.alphabet != alphabet:
                raise ConfigurationError(
                    f"Rotor {rotor.name!r} uses a different alphabet"
                )
            self._inventory[key] = rotor

        self._slots: list[Rotor] = []
        self._plugboard = Permutation((), alphabet)

    # ── shape ────────────────────────────────────────────────────

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._pawls

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        return tuple(self._slots)

    @property
    def inventory(self) -> dict[str, Rotor]:
        return dict(self._inventory)

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def get_rotor(self, k: int) -> Rotor:
        """Rotor in slot `k`; 0 is the reflector."""
        if not (0 <= k < len(self._slots)):
            raise SetupError(f"No rotor in slot {k}")
        return self._slots[k]

    # ── setup ────────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots with the inventory rotors called `names`.

        Settings are left alone; call `set_rotors` for a fresh setup. On
        failure the previous arrangement is kept.
        """
        if len(names) != self._num_rotors:
            raise SetupError(
                f"Expected {self._num_rotors} rotor names, got {len(names)}"
            )

        chosen: list[Rotor] = []
        for name in names:
            rotor = self._inventory.get(name.upper())
            if rotor is None:
                raise SetupError(f"Unknown rotor {name!r}")
            if any(r is rotor for r in chosen):
                raise SetupError(f"Rotor {name!r} used twice")
            chosen.append(rotor)

        if not chosen[0].reflecting():
            raise SetupError(f"Slot 0 needs a reflector, got {chosen[0].name!r}")
        for rotor in chosen[1:]:
            if rotor.reflecting():
                raise SetupError(f"Reflector {rotor.name!r} only fits slot 0")
        if not chosen[-1].rotates():
            raise SetupError(
                f"Last slot needs a moving rotor, got {chosen[-1].name!r}"
            )

        # rotating rotors must be exactly the rightmost `pawls` slots
        first_moving = self._num_rotors - self._pawls
        for k, rotor in enumerate(chosen):
            if rotor.rotates() != (k >= first_moving):
                raise SetupError(
                    f"Wrong number of moving/non-moving rotors: expected "
                    f"{self._pawls} moving rotors on the right"
                )

        self._slots = chosen
        self.debug.log("setup", f"rotors {[r.name for r in chosen]}")

    def set_rotors(self, setting: str) -> None:
        """Turn slots 1‥n-1 to the window letters in `setting`."""
        self._apply_letters(setting, "setting", Rotor.set)
        self.debug.log("setup", f"setting {setting}")

    def set_rings(self, rings: str) -> None:
        """Set the ring offsets of slots 1‥n-1, like `set_rotors`."""
        self._apply_letters(rings, "ring", Rotor.set_ring)
        self.debug.log("setup", f"rings {rings}")

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self._alphabet:
            raise SetupError("Plugboard uses a different alphabet")
        self._plugboard = plugboard
        self.debug.log("setup", f"plugboard {plugboard!r}")

    def _apply_letters(self, letters: str, what: str, apply) -> None:
        if len(self._slots) != self._num_rotors:
            raise SetupError("Rotors must be inserted first")
        if len(letters) != self._num_rotors - 1:
            raise SetupError(
                f"Rotor {what} {letters!r} must have {self._num_rotors - 1} letters"
            )
        for ch in letters:
            if ch not in self._alphabet:
                raise SetupError(f"Letter {ch!r} in {what} not in alphabet")
        for rotor, ch in zip(self._slots[1:], letters):
            apply(rotor, ch)

    # ── stepping logic  ─────────────────────────────────────────

    def _advance_rotors(self) -> None:
        """Advance rotors for one key-press.

        Left to right: a rotating rotor whose right neighbour sits at a
        notch moves together with that neighbour, and the neighbour is then
        skipped. The fast rotor always moves exactly once.
        """
        slots = self._slots
        last = len(slots) - 1
        i = 0
        while i <= last:
            if i == last:
                slots[i].advance()
            elif slots[i].rotates() and slots[i + 1].at_notch():
                slots[i].advance()
                slots[i + 1].advance()
                i += 1
            i += 1

        if self.debug.active("stepping"):
            self.debug.log("stepping", f"Rotor pos {[r.position for r in slots]}")

    def _window(self) -> str:
        to_char = self._alphabet.to_char
        return "".join(to_char(r.position) for r in self._slots[1:])

    # ── encipher one symbol  ────────────────────────────────────

    def convert(self, c: int) -> int:
        """Convert index `c` after first advancing the machine."""
        if len(self._slots) != self._num_rotors:
            raise SetupError("Rotors must be inserted first")
        self._advance_rotors()

        to_char = self._alphabet.to_char
        trace = self.debug.active("convert")
        if trace:
            path = [to_char(c)]

        c = self._plugboard_hop(c)
        if trace:
            path.append(to_char(c))

        c = self._apply_rotors(c)
        c = self._plugboard_hop(c)
        if trace:
            path.append(to_char(c))
            self.debug.log("convert", f"[{self._window()}] {' -> '.join(path)}")
        return c

    def _plugboard_hop(self, c: int) -> int:
        out = self._plugboard.permute(c)
        if self.debug.active("plugboard"):
            to_char = self._alphabet.to_char
            self.debug.log("plugboard", f"{to_char(c)} -> {to_char(out)}")
        return out

    def _apply_rotors(self, c: int) -> int:
        slots = self._slots
        verbose = self.debug.active("rotor")
        to_char = self._alphabet.to_char
        for rotor in reversed(slots):
            out = rotor.convert_forward(c)
            if verbose:
                self.debug.log("rotor", f"{rotor.name} fwd {to_char(c)} -> {to_char(out)}")
            c = out
        # the reflector turned the signal round; it is not crossed twice
        for rotor in slots[1:]:
            out = rotor.convert_backward(c)
            if verbose:
                self.debug.log("rotor", f"{rotor.name} bwd {to_char(c)} -> {to_char(out)}")
            c = out
        return c

    def convert_message(self, msg: str) -> str:
        """Convert `msg`; symbols outside the alphabet pass through as-is."""
        alpha = self._alphabet
        out: list[str] = []
        for ch in msg:
            index = alpha.to_int(ch)
            if index == -1:
                out.append(ch)
            else:
                out.append(alpha.to_char(self.convert(index)))
        return "".join(out)

    # nicety for debugging
    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._slots) or "empty"
        return f"<Machine {names} window={self._window()!r}>"
