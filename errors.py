# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure raised by the simulator."""


class ConfigurationError(EnigmaError):
    """Bad alphabet, wheel description, or machine shape."""


class SetupError(EnigmaError):
    """Bad setup line: rotor names, window letters, rings, or plugboard."""
