"""
Tests for identifier derivation.

Validates:
1. First instance unsuffixed, later instances index-suffixed
2. Label aliases in entry then label order, duplicates passed through
3. Display driver type names composed verbatim
"""

import copy
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from codegen.naming import instance_name, label_aliases, driver_name, driver_names


class TestInstanceName:
    """Test the first-unsuffixed naming convention."""

    def test_first_instance_unsuffixed(self):
        assert instance_name('display', 0) == 'display'

    def test_later_instances_suffixed(self):
        assert instance_name('display', 1) == 'display1'
        assert instance_name('encoder', 12) == 'encoder12'


class TestLabelAliases:
    """Test alias emission from user labels."""

    def test_single_label(self):
        lines = label_aliases('Switch', 'switches', [{'pin': 1, 'labels': ['foo']}])
        assert lines == ['Switch& foo = switches[0];']

    def test_entry_then_label_order(self):
        entries = [
            {'pin': 1, 'labels': ['a', 'b']},
            {'pin': 2},
            {'pin': 3, 'labels': ['c']},
        ]
        lines = label_aliases('Led', 'leds', entries)
        assert lines == [
            'Led& a = leds[0];',
            'Led& b = leds[0];',
            'Led& c = leds[2];',
        ]

    def test_no_labels(self):
        """Entries without labels (or with null labels) produce nothing."""
        assert label_aliases('Led', 'leds', [{'pin': 1}, {'pin': 2, 'labels': None}]) == []

    def test_duplicates_not_rejected(self):
        """Label collisions are left to the compiler."""
        entries = [{'labels': ['dup']}, {'labels': ['dup']}]
        lines = label_aliases('GateIn', 'gate_inputs', entries)
        assert len(lines) == 2


class TestDriverName:
    """Test display driver type derivation."""

    def test_ssd130x_i2c(self):
        display = {'driver': 'SSD130x', 'transport': 'I2c', 'dimensions': '128x64'}
        assert driver_name(display) == 'SSD130xI2c128x64Driver'

    def test_spi(self):
        display = {'driver': 'SSD130x', 'transport': '4WireSpi', 'dimensions': '128x32'}
        assert driver_name(display) == 'SSD130x4WireSpi128x32Driver'

    def test_no_normalization(self):
        """Parts are used exactly as written."""
        display = {'driver': 'ssd130x', 'transport': 'i2c', 'dimensions': '64X32'}
        assert driver_name(display) == 'ssd130xi2c64X32Driver'

    def test_parallel_list(self):
        displays = [
            {'driver': 'SSD130x', 'transport': 'I2c', 'dimensions': '128x64'},
            {'driver': 'SH1106', 'transport': '4WireSpi', 'dimensions': '128x64'},
        ]
        assert driver_names(displays) == [
            'SSD130xI2c128x64Driver',
            'SH11064WireSpi128x64Driver',
        ]

    def test_input_not_mutated(self):
        """The derived name is returned, never attached to the entry."""
        displays = [{'driver': 'SSD130x', 'transport': 'I2c', 'dimensions': '128x64'}]
        before = copy.deepcopy(displays)
        driver_names(displays)
        driver_names(displays)
        assert displays == before
