# suites.py
from __future__ import annotations

from typing import Any, Dict, List

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# name, kind, notches, wiring
_WHEELS: Dict[str, tuple[str, str, str]] = {
    # Legacy rotors
    "I":     ("M", "Q",  "EKMFLGDQVZNTOWYHXUSPAIBRCJ"),
    "II":    ("M", "E",  "AJDKSIRUXBLHWTMCQGZNPYFVOE"),
    "III":   ("M", "V",  "BDFHJLCPRTXVZNYEIWGAKMUSQO"),
    "IV":    ("M", "J",  "ESOVPZJAYQUIRHXLNFTGKDCMWB"),
    "V":     ("M", "Z",  "VZBRGITYUPSDNHLXAWMJQOFECK"),
    "VI":    ("M", "ZM", "JPGVOUMFYQBENHZRDKASXLICTW"),
    "VII":   ("M", "ZM", "NZJHGRCXMYSWBOUFAIVLPEKQDT"),
    "VIII":  ("M", "ZM", "FKQHTLXOCBJSPDZRAMEWNIUYGV"),
    # Naval fourth wheels
    "BETA":  ("N", "",   "LEYJVCNIXWPBQMDRTAKZGFUHOS"),
    "GAMMA": ("N", "",   "FSOKANUERHMBTIYCWLQPZXVGJD"),
}

# Wide reflectors (3-rotor machines)
_WIDE: Dict[str, str] = {
    "A": "EJMZALYXVBWFCRQUONTSPIKHGD",
    "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
}

# Thin reflectors (naval, paired with Beta/Gamma)
_THIN: Dict[str, str] = {
    "B": "ENKQAUYWJICOPBLMDXZVFTHRGS",
    "C": "RDOBJNTKVEHMLFCWZAXGYIPSUQ",
}

_ROTORS = ["I", "II", "III", "IV", "V", "VI", "VII", "VIII"]


def _wheel(name: str) -> Dict[str, str]:
    kind, notches, wiring = _WHEELS[name]
    return {"name": name, "kind": kind, "notches": notches, "wiring": wiring}


def _reflectors(table: Dict[str, str]) -> List[Dict[str, str]]:
    return [
        {"name": name, "kind": "R", "notches": "", "wiring": wiring}
        for name, wiring in table.items()
    ]


# Same shape as a JSON configuration file (see utilities.load_config).
SUITES: Dict[str, Dict[str, Any]] = {
    "M3": {
        "name": "M3",
        "alphabet": Alpha26,
        "rotors": 4,
        "pawls": 3,
        "wheels": _reflectors(_WIDE) + [_wheel(n) for n in _ROTORS],
    },
    "M4": {
        "name": "M4",
        "alphabet": Alpha26,
        "rotors": 5,
        "pawls": 3,
        "wheels": _reflectors(_THIN)
        + [_wheel(n) for n in _ROTORS]
        + [_wheel("BETA"), _wheel("GAMMA")],
    },
}


def get_suite(name: str) -> Dict[str, Any] | None:
    """Return the built-in suite called `name` (case-insensitive), if any."""
    return SUITES.get(name.upper())
