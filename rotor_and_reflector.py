# rotor_and_reflector.py
from __future__ import annotations

from enum import Enum

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigurationError, EnigmaError


class RotorKind(Enum):
    REFLECTOR = "R"
    FIXED = "N"
    MOVING = "M"


class Rotor:
    """One wheel: a wiring Permutation plus a rotational offset.

    Every wheel shares this shape; what it can do (rotate, reflect, carry
    notches) follows from `kind`. Build them with `Rotor.reflector`,
    `Rotor.fixed` or `Rotor.moving`.
    """

    def __init__(
        self,
        name: str,
        perm: Permutation,
        kind: RotorKind,
        notches: str = "",
    ) -> None:
        if kind is not RotorKind.MOVING and notches:
            raise ConfigurationError(f"Rotor {name}: only moving rotors carry notches")
        for ch in notches:
            if ch not in perm.alphabet:
                raise ConfigurationError(
                    f"Rotor {name}: notch {ch!r} not in alphabet"
                )
        if kind is RotorKind.REFLECTOR:
            _check_reflector_wiring(name, perm)

        self.name = name
        self.permutation = perm
        self.kind = kind
        self.notches = notches
        self.position = 0
        self.ring_setting = 0

    # ── variants ─────────────────────────────────────────────────
    @classmethod
    def reflector(cls, name: str, perm: Permutation) -> "Rotor":
        return cls(name, perm, RotorKind.REFLECTOR)

    @classmethod
    def fixed(cls, name: str, perm: Permutation) -> "Rotor":
        return cls(name, perm, RotorKind.FIXED)

    @classmethod
    def moving(cls, name: str, perm: Permutation, notches: str) -> "Rotor":
        return cls(name, perm, RotorKind.MOVING, notches)

    # ── shape ────────────────────────────────────────────────────
    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def size(self) -> int:
        return self.permutation.size

    @property
    def setting(self) -> int:
        return self.position

    def rotates(self) -> bool:
        return self.kind is RotorKind.MOVING

    def reflecting(self) -> bool:
        return self.kind is RotorKind.REFLECTOR

    # ── position & ring ──────────────────────────────────────────
    def set(self, posn: int | str) -> None:
        """Turn to `posn` (an index, wrapped, or a window letter)."""
        if isinstance(posn, str):
            index = self.alphabet.to_int(posn)
            if index == -1:
                raise EnigmaError(f"Rotor {self.name}: {posn!r} not in alphabet")
        else:
            index = self.permutation.wrap(posn)

        if self.reflecting() and index != 0:
            raise EnigmaError(f"Reflector {self.name} has only one position")
        self.position = index

    def set_ring(self, ring: int | str) -> None:
        """Shift the wiring against the alphabet ring (0 = no shift)."""
        if isinstance(ring, str):
            index = self.alphabet.to_int(ring)
            if index == -1:
                raise EnigmaError(f"Rotor {self.name}: ring {ring!r} not in alphabet")
        else:
            index = self.permutation.wrap(ring)

        if self.reflecting() and index != 0:
            raise EnigmaError(f"Reflector {self.name} has no ring")
        self.ring_setting = index

    # ── stepping --------------------------------------------------
    def at_notch(self) -> bool:
        if self.reflecting():
            raise EnigmaError(f"Reflector {self.name} has no notches")
        if not self.rotates():
            return False
        return self.alphabet.to_char(self.position % self.size) in self.notches

    def advance(self) -> None:
        if self.reflecting():
            raise EnigmaError(f"Reflector {self.name} cannot advance")
        if self.rotates():
            self.set(self.position + 1)

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        offset = self.position - self.ring_setting
        perm = self.permutation
        return perm.wrap(perm.permute(perm.wrap(p + offset)) - offset)

    def convert_backward(self, e: int) -> int:
        offset = self.position - self.ring_setting
        perm = self.permutation
        return perm.wrap(perm.invert(perm.wrap(e + offset)) - offset)

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return (
            f"<Rotor {self.name} {self.kind.name} pos={self.position}"
            f" ring={self.ring_setting} notches={self.notches!r}>"
        )


def _check_reflector_wiring(name: str, perm: Permutation) -> None:
    # a reflector pairs every symbol with a different one
    if not perm.derangement():
        raise ConfigurationError(f"Reflector {name}: wiring has a fixed point")
    if any(len(c) != 2 for c in perm.cycles):
        raise ConfigurationError(f"Reflector {name}: every cycle must be a pair")
