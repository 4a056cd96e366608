"""
Unit tests for Machine.

Tests:
- Construction and slot validation
- Stepping, including the double step
- Known ciphertexts and reciprocity
- Pass-through of symbols outside the alphabet
- Diagnostic trace
"""

import logging

import pytest

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import ConfigurationError, SetupError
from machine import Machine
from rotor_and_reflector import Rotor
from utilities import set_up


def window(machine):
    to_char = machine.alphabet.to_char
    return "".join(to_char(machine.get_rotor(k).setting) for k in range(1, machine.num_rotors))


class TestConstruction:
    """Machine shape checks."""

    def test_counts(self, m4):
        assert m4.num_rotors == 5
        assert m4.num_pawls == 3

    @pytest.mark.parametrize("num_rotors, pawls", [(1, 0), (3, 3), (3, -1)])
    def test_bad_counts(self, upper, num_rotors, pawls):
        with pytest.raises(ConfigurationError):
            Machine(upper, num_rotors, pawls, [])

    def test_duplicate_names(self, upper):
        perm = Permutation("", upper)
        with pytest.raises(ConfigurationError):
            Machine(upper, 2, 1, [Rotor.fixed("X", perm), Rotor.fixed("x", perm)])

    def test_foreign_alphabet(self, upper):
        rotor = Rotor.fixed("X", Permutation("", Alphabet("AB")))
        with pytest.raises(ConfigurationError):
            Machine(upper, 2, 1, [rotor])

    def test_default_plugboard_is_identity(self, m4):
        assert m4.plugboard.cycles == ()


class TestInsertRotors:
    """insert_rotors and set_rotors validation."""

    def test_insert_and_set(self, m4):
        m4.insert_rotors(["B", "BETA", "III", "IV", "I"])
        m4.set_rotors("AXLE")
        assert [r.name for r in m4.rotors] == ["B", "BETA", "III", "IV", "I"]
        assert window(m4) == "AXLE"
        assert m4.get_rotor(0).setting == 0

    def test_names_case_insensitive(self, m4):
        m4.insert_rotors(["b", "Beta", "iii", "IV", "i"])
        assert m4.get_rotor(1).name == "BETA"

    def test_rotors_shared_with_inventory(self, m4):
        m4.insert_rotors(["B", "BETA", "III", "IV", "I"])
        assert m4.get_rotor(4) is m4.inventory["I"]

    def test_reinsert_replaces_slots(self, m4):
        m4.insert_rotors(["B", "BETA", "III", "IV", "I"])
        m4.insert_rotors(["C", "GAMMA", "I", "II", "III"])
        assert len(m4.rotors) == 5
        assert m4.get_rotor(0).name == "C"

    def test_wrong_count(self, m4):
        with pytest.raises(SetupError):
            m4.insert_rotors(["B", "BETA", "III", "IV"])

    def test_unknown_name(self, m4):
        with pytest.raises(SetupError):
            m4.insert_rotors(["B", "BETA", "III", "IV", "IX"])

    def test_repeated_rotor(self, m4):
        with pytest.raises(SetupError):
            m4.insert_rotors(["B", "BETA", "III", "III", "I"])

    def test_slot_zero_must_reflect(self, m4):
        with pytest.raises(SetupError):
            m4.insert_rotors(["BETA", "B", "III", "IV", "I"])

    def test_last_slot_must_rotate(self, m4):
        with pytest.raises(SetupError):
            m4.insert_rotors(["B", "III", "IV", "I", "BETA"])

    def test_moving_count_must_match_pawls(self, m4):
        with pytest.raises(SetupError):
            m4.insert_rotors(["B", "II", "III", "IV", "I"])

    def test_failed_insert_keeps_previous(self, m4):
        m4.insert_rotors(["B", "BETA", "III", "IV", "I"])
        with pytest.raises(SetupError):
            m4.insert_rotors(["B", "BETA", "III", "IV", "IX"])
        assert [r.name for r in m4.rotors] == ["B", "BETA", "III", "IV", "I"]

    def test_setting_length(self, m4):
        m4.insert_rotors(["B", "BETA", "III", "IV", "I"])
        with pytest.raises(SetupError):
            m4.set_rotors("AXL")

    def test_setting_outside_alphabet(self, m4):
        m4.insert_rotors(["B", "BETA", "III", "IV", "I"])
        with pytest.raises(SetupError):
            m4.set_rotors("AXL?")

    def test_convert_needs_rotors(self, m4):
        with pytest.raises(SetupError):
            m4.convert(0)


class TestStepping:
    """Rotor advance on each key-press."""

    def test_fast_rotor_always_moves(self, m3):
        set_up(m3, "* B I II III AAA")
        m3.convert_message("AAAA")
        assert window(m3) == "AAE"

    def test_notch_moves_neighbour(self, m3):
        # III one before its notch: first key moves III alone,
        # second key (III at the notch) moves II and III together
        set_up(m3, "* B I II III AAU")
        m3.convert(0)
        assert window(m3) == "AAV"
        m3.convert(0)
        assert window(m3) == "ABW"

    def test_double_step(self, m3):
        set_up(m3, "* B I II III ADU")
        seen = []
        for _ in range(3):
            m3.convert(0)
            seen.append(window(m3))
        assert seen == ["ADV", "AEW", "BFX"]

    def test_fixed_rotor_never_moves(self, m4):
        set_up(m4, "* B BETA I II III AADU")
        m4.convert_message("A" * 30)
        assert window(m4)[0] == "A"

    def test_left_to_right_scan_with_many_pawls(self, upper):
        # every moving rotor at its notch: pairs (1, 2) and then slot 3 alone
        refl = Rotor.reflector("R", Permutation("(AB) (CD) (EF) (GH) (IJ) (KL) (MN) (OP) (QR) (ST) (UV) (WX) (YZ)", upper))
        movers = [Rotor.moving(f"M{i}", Permutation("", upper), "A") for i in range(1, 4)]
        machine = Machine(upper, 4, 3, [refl] + movers)
        machine.insert_rotors(["R", "M1", "M2", "M3"])
        machine.set_rotors("AAA")
        machine.convert(0)
        assert window(machine) == "BBB"
        machine.convert(0)
        assert window(machine) == "BBC"

    def test_pair_skip_before_fast_rotor(self, small_machine):
        # slow rotor stepped by the fast one's notch; fast moves only once
        small_machine.insert_rotors(["R", "SLOW", "FAST"])
        small_machine.set_rotors("AQ")
        small_machine.convert(0)
        assert window(small_machine) == "BR"


class TestConversion:
    """Known ciphertexts and reciprocity."""

    def test_hello_world_naval(self, m4):
        set_up(m4, "* B BETA III IV I AXLE")
        assert m4.convert_message("HELLOWORLD") == "FHVGJZUKSG"

    def test_hello_world_three_rotor(self, m3):
        set_up(m3, "* B I II III AAA")
        assert m3.convert_message("HELLOWORLD") == "ILBDAAMTAZ"

    def test_thin_reflector_with_beta_matches_wide(self, m4):
        set_up(m4, "* B BETA I II III AAAA")
        assert m4.convert_message("HELLOWORLD") == "ILBDAAMTAZ"

    def test_hiawatha(self, m4):
        set_up(m4, "* B Beta III IV I AXLE (HQ) (EX) (IP) (TR) (BY)")
        assert m4.convert_message("FROMHISSHOULDERHIAWATHA") == "QVPQSOKOILPUBKJZPISFXDW"

    def test_reciprocity(self, m4):
        message = "THEQUICKBROWNFOXJUMPSOVERTHELAZYDOGQQQQQQQQQQQQQQQQQQQQQQQQQQ"
        line = "* B BETA III IV I AXLE (HQ) (EX) (IP) (TR) (BY)"
        set_up(m4, line)
        cipher = m4.convert_message(message)
        set_up(m4, line)
        assert m4.convert_message(cipher) == message

    def test_no_symbol_maps_to_itself(self, m4):
        set_up(m4, "* B BETA III IV I AXLE")
        plain = "A" * 100
        assert "A" not in m4.convert_message(plain)

    def test_plugboard_applied(self, m4):
        set_up(m4, "* B BETA III IV I AXLE")
        plain = m4.convert_message("HELLOWORLD")
        set_up(m4, "* B BETA III IV I AXLE (AZ)")
        assert m4.convert_message("HELLOWORLD") != plain

    def test_ring_setting(self, m3):
        # ring and window moved together leave the wiring offsets unchanged;
        # no notch is reached within 20 key-presses from either start
        set_up(m3, "* B I II III AAA")
        base = m3.convert_message("HELLOWORLDHELLOWORLD")
        set_up(m3, "* B I II III BBB BBB")
        assert m3.convert_message("HELLOWORLDHELLOWORLD") == base

    def test_ring_changes_output(self, m3):
        set_up(m3, "* B I II III AAA")
        base = m3.convert_message("HELLOWORLD")
        set_up(m3, "* B I II III AAA BBB")
        assert m3.convert_message("HELLOWORLD") != base

    def test_default_rings_reset(self, m3):
        set_up(m3, "* B I II III AAA BBB")
        set_up(m3, "* B I II III AAA")
        assert all(r.ring_setting == 0 for r in m3.rotors)


class TestPassThrough:
    """Symbols outside the alphabet."""

    def test_punctuation_kept(self, m4):
        set_up(m4, "* B BETA III IV I AXLE")
        assert m4.convert_message("HELLO, WORLD!") == "FHVGJ, ZUKSG!"

    def test_punctuation_does_not_step(self, m4):
        set_up(m4, "* B BETA III IV I AXLE")
        m4.convert_message(",,, !!! ...")
        assert window(m4) == "AXLE"

    def test_length_preserved(self, m4):
        set_up(m4, "* B BETA III IV I AXLE")
        msg = "a-b C.d E"
        out = m4.convert_message(msg)
        assert len(out) == len(msg)
        assert [c for c in out if c not in m4.alphabet] == [c for c in msg if c not in m4.alphabet]


class TestDiagnostics:
    """The explicit debug sink."""

    def test_silent_by_default(self, m4, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        set_up(m4, "* B BETA III IV I AXLE")
        m4.convert_message("H")
        assert caplog.records == []

    def test_convert_trace(self, naval_conf, caplog):
        from utilities import read_config

        debug = Debug()
        debug.enable("convert")
        machine = read_config(naval_conf, debug)
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        set_up(machine, "* B Beta III IV I AXLE")
        machine.convert_message("H")
        assert "[CONVERT] [AXLF] H -> H -> F" in caplog.messages

    def test_stepping_trace(self, naval_conf, caplog):
        from utilities import read_config

        debug = Debug()
        debug.enable("stepping")
        machine = read_config(naval_conf, debug)
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        set_up(machine, "* B Beta III IV I AXLE")
        machine.convert(0)
        assert "[STEPPING] Rotor pos [0, 0, 23, 11, 5]" in caplog.messages

    def test_plugboard_trace(self, naval_conf, caplog):
        from utilities import read_config

        debug = Debug()
        debug.enable("plugboard")
        machine = read_config(naval_conf, debug)
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        set_up(machine, "* B Beta III IV I AXLE (HQ)")
        machine.convert_message("H")
        hops = [m for m in caplog.messages if m.startswith("[PLUGBOARD]")]
        assert len(hops) == 2
        assert hops[0] == "[PLUGBOARD] H -> Q"

    def test_rotor_trace(self, naval_conf, caplog):
        from utilities import read_config

        debug = Debug()
        debug.enable("rotor")
        machine = read_config(naval_conf, debug)
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        set_up(machine, "* B Beta III IV I AXLE")
        assert machine.convert_message("H") == "F"
        hops = [m for m in caplog.messages if m.startswith("[ROTOR]")]
        # five wheels on the way in, four on the way back
        assert len(hops) == 9
        assert hops[0].startswith("[ROTOR] I fwd H -> ")
        assert hops[4].startswith("[ROTOR] B fwd ")
        assert hops[-1].startswith("[ROTOR] I bwd ")
        assert hops[-1].endswith(" -> F")
