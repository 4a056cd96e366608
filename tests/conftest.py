"""Shared fixtures: alphabets, wheel sets and ready-built machines."""

import pytest

from alphabet_and_permutation import Alphabet, Permutation
from machine import Machine
from rotor_and_reflector import Rotor
from suites import SUITES
from utilities import machine_from_dict, read_config


NAVAL_CONF = """\
ABCDEFGHIJKLMNOPQRSTUVWXYZ
5 3
I MQ      (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
II ME     (FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)
III MV    (ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)
IV MJ     (AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)
Beta N    (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
B R       (AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP)
          (RX) (SZ) (TV)
"""


@pytest.fixture
def upper():
    return Alphabet()


@pytest.fixture
def naval_conf():
    return NAVAL_CONF


@pytest.fixture
def naval(naval_conf):
    """Five-slot machine read from the text configuration above."""
    return read_config(naval_conf)


@pytest.fixture
def m3():
    return machine_from_dict(SUITES["M3"])


@pytest.fixture
def m4():
    return machine_from_dict(SUITES["M4"])


@pytest.fixture
def small_machine(upper):
    """Three slots: reflector, slow rotor, fast rotor, built by hand."""
    refl = Rotor.reflector(
        "R",
        Permutation("(AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP) (RX) (SZ) (TV)", upper),
    )
    slow = Rotor.moving("SLOW", Permutation("(ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)", upper), "V")
    fast = Rotor.moving("FAST", Permutation("(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)", upper), "Q")
    return Machine(upper, 3, 2, [refl, slow, fast])
