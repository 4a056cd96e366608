# alphabet_and_permutation.py
from __future__ import annotations

import re
from collections.abc import Iterable

from errors import ConfigurationError, EnigmaError

UPPER26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_cycle_re = re.compile(r"\(([^()]*)\)")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """Ordered set of encodable symbols; the K-th symbol has index K."""

    def __init__(self, chars: str = UPPER26) -> None:
        if not chars:
            raise ConfigurationError("Alphabet must contain at least one symbol")
        seen: set[str] = set()
        for ch in chars:
            if ch in seen:
                raise ConfigurationError(f"Duplicate symbol {ch!r} in alphabet")
            seen.add(ch)

        self.chars: str = chars
        self.char_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(chars)
        }

    @property
    def size(self) -> int:
        return len(self.chars)

    def contains(self, ch: str) -> bool:
        return ch in self.char_to_index

    # integer signal → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < self.size):
            hi = self.size - 1
            raise EnigmaError(f"Index {index} out of range 0–{hi}")
        return self.chars[index]

    # symbol → integer signal, -1 when absent
    def to_int(self, ch: str) -> int:
        return self.char_to_index.get(ch, -1)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, ch: object) -> bool:
        return isinstance(ch, str) and self.contains(ch)

    def __iter__(self):
        return iter(self.chars)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars!r}>"


# ── Permutation ───────────────────────────────────────────────────
def parse_cycles(notation: str) -> list[str]:
    """Split cycle notation "(ABC) (DE)" into ["ABC", "DE"].

    Whitespace between and inside cycles is ignored. Anything that is not a
    parenthesised group is rejected.
    """
    text = "".join(notation.split())
    cycles: list[str] = []
    pos = 0
    for m in _cycle_re.finditer(text):
        if m.start() != pos:
            raise ConfigurationError(f"Malformed cycle notation {notation!r}")
        cycles.append(m.group(1))
        pos = m.end()
    if pos != len(text):
        raise ConfigurationError(f"Malformed cycle notation {notation!r}")
    return cycles


class Permutation:
    """A substitution over an Alphabet, given as disjoint cycles.

    `cycles` is either a string in cycle notation or an iterable of cycle
    bodies. Symbols that appear in no cycle map to themselves. Both lookup
    directions are served from tables built here, once.
    """

    def __init__(self, cycles: str | Iterable[str], alphabet: Alphabet) -> None:
        if isinstance(cycles, str):
            cycles = parse_cycles(cycles)

        self._alphabet = alphabet
        size = alphabet.size
        self._fwd: list[int] = list(range(size))
        self._rev: list[int] = list(range(size))

        used: set[str] = set()
        kept: list[str] = []
        for cycle in cycles:
            if not cycle:
                raise ConfigurationError("Empty cycle in permutation")
            for ch in cycle:
                if ch not in alphabet:
                    raise ConfigurationError(f"Symbol {ch!r} not in alphabet")
                if ch in used:
                    raise ConfigurationError(f"Symbol {ch!r} used twice in cycles")
                used.add(ch)

            # c0 → c1 → … → cm → c0
            idx = [alphabet.to_int(ch) for ch in cycle]
            for a, b in zip(idx, idx[1:] + idx[:1]):
                self._fwd[a] = b
                self._rev[b] = a
            kept.append(cycle)

        self._cycles: tuple[str, ...] = tuple(kept)

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string: the i-th symbol maps to wiring[i]."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise ConfigurationError("wiring must be a permutation of alphabet")

        image = dict(zip(alphabet.chars, wiring))
        seen: set[str] = set()
        cycles: list[str] = []
        for start in alphabet.chars:
            if start in seen or image[start] == start:
                continue
            cycle = []
            ch = start
            while ch not in seen:
                seen.add(ch)
                cycle.append(ch)
                ch = image[ch]
            cycles.append("".join(cycle))
        return cls(cycles, alphabet)

    # ── shape ────────────────────────────────────────────────────
    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def size(self) -> int:
        return self._alphabet.size

    @property
    def cycles(self) -> tuple[str, ...]:
        return self._cycles

    def wrap(self, p: int) -> int:
        """Return `p` reduced into [0, size)."""
        return p % self.size  # Python's % is already floored

    # ── lookups ──────────────────────────────────────────────────
    def permute(self, p: int | str) -> int | str:
        if isinstance(p, str):
            return self._alphabet.to_char(self._fwd[self._index_of(p)])
        return self._fwd[self.wrap(p)]

    def invert(self, c: int | str) -> int | str:
        if isinstance(c, str):
            return self._alphabet.to_char(self._rev[self._index_of(c)])
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(self._fwd[i] != i for i in range(self.size))

    def _index_of(self, ch: str) -> int:
        i = self._alphabet.to_int(ch)
        if i == -1:
            raise EnigmaError(f"Symbol {ch!r} not in alphabet")
        return i

    # nicety for debugging
    def __repr__(self) -> str:
        body = " ".join(f"({c})" for c in self._cycles)
        return f"<Permutation {body}>"
