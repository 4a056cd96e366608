# utilities.py
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import ConfigurationError, SetupError
from machine import Machine
from rotor_and_reflector import Rotor, RotorKind
from suites import get_suite

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_cycle_tok_re = re.compile(r"^\(.*\)$")
FORBIDDEN = set("*()")


def _check_alphabet(chars: str) -> Alphabet:
    bad = (set(chars) & FORBIDDEN) or {c for c in chars if c.isspace()}
    if bad:
        raise ConfigurationError(f"Wrong alphabet formatting: {''.join(sorted(bad))!r}")
    return Alphabet(chars)


def _make_rotor(name: str, kind: str, cycles: Permutation) -> Rotor:
    """Build a wheel from its type code: `M<notches>`, `N` or `R`."""
    if not kind:
        raise ConfigurationError(f"Bad rotor description for {name!r}")
    code, notches = kind[0], kind[1:]
    if code == RotorKind.MOVING.value:
        return Rotor.moving(name, cycles, notches)
    if notches:
        raise ConfigurationError(f"Rotor {name!r}: type {kind!r} takes no notches")
    if code == RotorKind.FIXED.value:
        return Rotor.fixed(name, cycles)
    if code == RotorKind.REFLECTOR.value:
        return Rotor.reflector(name, cycles)
    raise ConfigurationError(f"Bad rotor type {kind!r} for {name!r}")


# ────────────────────────────────────────────────────────────────────────
#  1. Machine configuration
# ────────────────────────────────────────────────────────────────────────


def read_config(text: str, debug: Debug | None = None) -> Machine:
    """Build a Machine from the plain-text configuration format.

    Line 1 is the alphabet; the next two tokens are the slot and pawl
    counts; what follows is a run of rotor descriptions
    `NAME TYPE (cycle) (cycle) ...`, which may span lines.
    """
    lines = text.splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise ConfigurationError("configuration file truncated")

    head = lines[0].split()
    if len(head) != 1:
        raise ConfigurationError("Wrong alphabet formatting")
    alphabet = _check_alphabet(head[0])

    tokens = " ".join(lines[1:]).split()
    if len(tokens) < 2:
        raise ConfigurationError("configuration file truncated")
    try:
        num_rotors, pawls = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise ConfigurationError(
            f"Bad rotor/pawl counts {tokens[0]!r} {tokens[1]!r}"
        ) from None

    rotors: List[Rotor] = []
    pos = 2
    while pos < len(tokens):
        if pos + 1 >= len(tokens):
            raise ConfigurationError(f"bad rotor description at {tokens[pos]!r}")
        name, kind = tokens[pos], tokens[pos + 1]
        if _cycle_tok_re.match(name) or _cycle_tok_re.match(kind):
            raise ConfigurationError(f"bad rotor description at {name!r}")
        pos += 2

        cycles = ""
        while pos < len(tokens) and _cycle_tok_re.match(tokens[pos]):
            cycles += tokens[pos]
            pos += 1
        rotors.append(_make_rotor(name, kind, Permutation(cycles, alphabet)))

    return Machine(alphabet, num_rotors, pawls, rotors, debug=debug)


def machine_from_dict(data: Dict[str, Any], debug: Debug | None = None) -> Machine:
    """Build a Machine from a JSON-style dict (also the shape of SUITES)."""
    required = {"alphabet", "rotors", "pawls", "wheels"}
    missing = required - data.keys()
    if missing:
        raise ConfigurationError(f"Missing keys in config: {', '.join(sorted(missing))}")

    if not isinstance(data["alphabet"], str):
        raise ConfigurationError("Config 'alphabet' must be a string")
    if not isinstance(data["wheels"], list):
        raise ConfigurationError("Config 'wheels' must be a list")

    alphabet = _check_alphabet(data["alphabet"])
    rotors: List[Rotor] = []
    for wheel in data["wheels"]:
        if not isinstance(wheel, dict) or not {"name", "kind"} <= wheel.keys():
            raise ConfigurationError(f"Bad wheel entry {wheel!r}")
        for key in ("name", "kind", "notches", "cycles", "wiring"):
            if key in wheel and not isinstance(wheel[key], str):
                raise ConfigurationError(
                    f"Wheel {wheel.get('name')!r}: {key!r} must be a string"
                )

        if "wiring" in wheel:
            perm = Permutation.from_wiring(wheel["wiring"], alphabet)
        else:
            perm = Permutation(wheel.get("cycles", ""), alphabet)
        kind = wheel["kind"] + wheel.get("notches", "")
        rotors.append(_make_rotor(wheel["name"], kind, perm))

    try:
        num_rotors, pawls = int(data["rotors"]), int(data["pawls"])
    except (TypeError, ValueError):
        raise ConfigurationError("Bad rotor/pawl counts") from None
    return Machine(alphabet, num_rotors, pawls, rotors, debug=debug)


def load_config(path: str | Path) -> dict:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Bad JSON in {path}: {exc}") from None
    except UnicodeDecodeError:
        raise ConfigurationError(f"{path} is not valid UTF-8") from None
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be an object")
    return data


def load_machine(source: str | Path, debug: Debug | None = None) -> Machine:
    """Build a Machine from a built-in suite name, a .json file or a text file."""
    suite = get_suite(str(source))
    path = Path(source)
    if suite is not None and not path.exists():
        return machine_from_dict(suite, debug)
    if path.suffix.lower() == ".json":
        return machine_from_dict(load_config(path), debug)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise ConfigurationError(f"{path} is not valid UTF-8") from None
    return read_config(text, debug)


# ────────────────────────────────────────────────────────────────────────
#  2. Setup lines
# ────────────────────────────────────────────────────────────────────────


def is_setup_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def set_up(machine: Machine, line: str) -> None:
    """Apply `* NAME… SETTING [RINGS] [(cycles)…]` to `machine`.

    Everything is checked before the machine is touched, so a bad line
    leaves the previous setup in force.
    """
    tokens = line.split()
    n = machine.num_rotors
    if not tokens or tokens[0] != "*":
        raise SetupError("Setup line should begin with '*'")
    if len(tokens) < n + 2:
        raise SetupError(f"Setup line needs {n} rotor names and a setting")

    names = tokens[1 : n + 1]
    setting = tokens[n + 1]
    rest = tokens[n + 2 :]
    rings = None
    if rest and not rest[0].startswith("("):
        rings = rest.pop(0)

    if any(_cycle_tok_re.match(t) for t in names + [setting]):
        raise SetupError(f"Setup line needs {n} rotor names and a setting")
    for what, letters in (("setting", setting), ("ring", rings)):
        if letters is None:
            continue
        if len(letters) != n - 1:
            raise SetupError(f"Rotor {what} {letters!r} must have {n - 1} letters")
        if any(ch not in machine.alphabet for ch in letters):
            raise SetupError(f"Rotor {what} {letters!r} not in alphabet")

    try:
        plugboard = Permutation(" ".join(rest), machine.alphabet)
    except ConfigurationError as exc:
        raise SetupError(f"Bad plugboard: {exc}") from None

    machine.insert_rotors(names)
    machine.set_rotors(setting)
    machine.set_rings(rings if rings is not None else machine.alphabet.to_char(0) * (n - 1))
    machine.set_plugboard(plugboard)


# ────────────────────────────────────────────────────────────────────────
#  3. Message processing & output
# ────────────────────────────────────────────────────────────────────────


def format_groups(msg: str, block: int = 5) -> str:
    """Split `msg` into space-separated groups of `block` symbols."""
    if block <= 0:
        return msg
    return " ".join(msg[i : i + block] for i in range(0, len(msg), block))


def process(machine: Machine, lines, block: int = 5):
    """Yield one output line per message line; setup lines yield nothing."""
    configured = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if is_setup_line(line):
            set_up(machine, line)
            configured = True
        elif not line.strip():
            yield ""
        elif not configured:
            raise SetupError("Input must start with a setup line")
        else:
            converted = machine.convert_message(line.replace(" ", ""))
            yield format_groups(converted, block)


__all__ = [
    "format_groups",
    "is_setup_line",
    "load_config",
    "load_machine",
    "machine_from_dict",
    "process",
    "read_config",
    "set_up",
]
