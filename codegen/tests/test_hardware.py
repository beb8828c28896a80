"""
Tests for the hardware header composition.

Validates:
1. Byte-identical output across runs, description untouched
2. Fixed declaration and initialization order across kinds
3. Per-tick routines: analog, digital, combined, LEDs
4. An empty description still yields a complete struct
"""

import copy
import re
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from codegen.hardware import generate_hardware_source, generate_phase, member_names
from codegen.peripherals import PeripheralKind
from codegen.phases import Phase


# Patch-style build: knobs, CV, gate, encoder, switches, LEDs, display
FULL_DESCRIPTION = {
    'analog_controls': [
        {'pin': 15, 'labels': ['knob1']},
        {'pin': 16, 'labels': ['knob2']},
    ],
    'cv_inputs': [{'pin': 21, 'labels': ['cv1']}],
    'cv_outputs': [{'pin': 22}, {'pin': 23}, {'pin': 24}],
    'encoders': [{'pin_a': 26, 'pin_b': 25, 'pin_switch': 13}],
    'gate_inputs': [{'pin': 20, 'labels': ['gate_in1']}],
    'gate_outputs': [{'pin': 17}],
    'leds': [{'pin': 7, 'labels': ['led1']}],
    'midi_handlers': [{'transport': 'uart'}],
    'oled_displays': [{
        'driver': 'SSD130x',
        'transport': '4WireSpi',
        'dimensions': '128x64',
        '4_wire_spi_config': {'pin_dc': 9, 'pin_reset': 30},
    }],
    'rgb_leds': [{'pin_r': 1, 'pin_g': 2, 'pin_b': 3}],
    'switches': [{
        'pin': 28,
        'type': 'TYPE_MOMENTARY',
        'polarity': 'POLARITY_INVERTED',
        'pull': 'PULL_UP',
        'labels': ['button1'],
    }],
}


def _routine_body(source: str, signature: str) -> list:
    """Lines between the braces of a generated member function."""
    lines = source.splitlines()
    start = lines.index(f'    {signature}') + 2
    end = lines.index('    }', start)
    return [line.strip() for line in lines[start:end] if line.strip()]


class TestIdempotence:
    """Generation is a pure function of the description."""

    def test_byte_identical(self):
        assert generate_hardware_source(FULL_DESCRIPTION) == generate_hardware_source(FULL_DESCRIPTION)

    def test_description_not_mutated(self):
        description = copy.deepcopy(FULL_DESCRIPTION)
        generate_hardware_source(description)
        generate_hardware_source(description)
        assert description == FULL_DESCRIPTION


class TestLayout:
    """Test the fixed regions of the header."""

    def test_prologue(self):
        source = generate_hardware_source(FULL_DESCRIPTION)
        lines = source.splitlines()
        assert lines[0] == '// File was generated, do not edit!'
        assert lines[1] == '#pragma once'
        assert lines[3] == '#include "daisy_seed.h"'
        assert lines[4] == '#include "dev/oled_ssd130x.h"'
        assert 'using namespace daisy;' in lines

    def test_seed_declared_first(self):
        source = generate_hardware_source(FULL_DESCRIPTION)
        lines = source.splitlines()
        struct_start = lines.index('typedef struct {')
        assert lines[struct_start + 1] == '    DaisySeed seed;'

    def test_declaration_order(self):
        source = generate_hardware_source(FULL_DESCRIPTION)
        markers = [
            'AnalogControl controls[3];',
            'Encoder encoders[1];',
            'GateIn gate_inputs[1];',
            'Led leds[1];',
            'OledDisplay<SSD130x4WireSpi128x64Driver> display;',
            'RgbLed rgb_leds[1];',
            'Switch switches[1];',
        ]
        positions = [source.index(m) for m in markers]
        assert positions == sorted(positions)

    def test_initialization_order(self):
        body = _routine_body(generate_hardware_source(FULL_DESCRIPTION), 'void Init(bool boost)')
        assert body[0] == 'seed.Configure();'
        assert body[1] == 'seed.Init(boost);'
        begins = [line for line in body if line.startswith('// BEGIN')]
        assert begins == [
            '// BEGIN - controls initialization',
            '// BEGIN - cv_outputs initialization',
            '// BEGIN - encoders initialization',
            '// BEGIN - gate_inputs initialization',
            '// BEGIN - leds initialization',
            '// BEGIN - oled_displays initialization',
            '// BEGIN - rgb_leds initialization',
            '// BEGIN - switches initialization',
        ]

    def test_member_indentation(self):
        source = generate_hardware_source(FULL_DESCRIPTION)
        assert '\n    Switch& button1 = switches[0];\n' in source
        assert '\n        switches[0].Debounce();\n' in source

    def test_struct_name(self):
        assert generate_hardware_source({}).rstrip().endswith('} Daisy;')
        assert generate_hardware_source({}, struct_name='MyPanel').rstrip().endswith('} MyPanel;')


class TestRoutines:
    """Test the per-tick routines."""

    def test_analog_routine(self):
        body = _routine_body(generate_hardware_source(FULL_DESCRIPTION), 'void ProcessAnalogControls()')
        assert body == [
            '// process controls',
            'controls[0].Process();',
            'controls[1].Process();',
            'controls[2].Process();',
        ]

    def test_digital_routine(self):
        body = _routine_body(generate_hardware_source(FULL_DESCRIPTION), 'void ProcessDigitalControls()')
        assert body == [
            '// process encoders',
            'encoders[0].Debounce();',
            '// process switches',
            'switches[0].Debounce();',
        ]

    def test_all_controls_excludes_leds(self):
        body = _routine_body(generate_hardware_source(FULL_DESCRIPTION), 'inline void ProcessAllControls()')
        assert body == ['ProcessAnalogControls();', 'ProcessDigitalControls();']

    def test_led_routine(self):
        body = _routine_body(generate_hardware_source(FULL_DESCRIPTION), 'void UpdateLeds()')
        assert body == [
            '// process leds',
            'leds[0].Update();',
            '// process rgb_leds',
            'rgb_leds[0].Update();',
        ]


class TestEmptyDescription:
    """An empty description still produces a usable struct."""

    def test_no_members(self):
        source = generate_hardware_source({})
        assert '[' not in source
        assert 'dev/oled_ssd130x.h' not in source

    def test_routines_present(self):
        source = generate_hardware_source({})
        for signature in ('void Init(bool boost)', 'void ProcessAnalogControls()',
                          'void ProcessDigitalControls()', 'inline void ProcessAllControls()',
                          'void UpdateLeds()'):
            assert f'    {signature}' in source
        assert _routine_body(source, 'void ProcessAnalogControls()') == []
        assert _routine_body(source, 'void Init(bool boost)') == ['seed.Configure();', 'seed.Init(boost);']

    def test_none_description(self):
        assert generate_hardware_source(None) == generate_hardware_source({})

    def test_placeholders_do_not_change_output(self):
        """Gate outputs and MIDI handlers leave the header untouched."""
        with_placeholders = {'gate_outputs': [{'pin': 1}], 'midi_handlers': [{}]}
        assert generate_hardware_source(with_placeholders) == generate_hardware_source({})


class TestGeneratePhase:
    """Test per-phase fragment collection."""

    def test_skips_empty(self):
        fragments = generate_phase({'leds': [{'pin': 1}]}, Phase.DECLARATION)
        assert len(fragments) == 1

    def test_kind_filter(self):
        fragments = generate_phase(FULL_DESCRIPTION, Phase.PROCESSING,
                                   [PeripheralKind.SWITCH, PeripheralKind.ENCODER])
        assert fragments[0].startswith('// process encoders')
        assert fragments[1].startswith('// process switches')

    def test_truncation_in_composition(self):
        description = {'cv_outputs': [{'pin': i} for i in range(5)]}
        source = generate_hardware_source(description)
        assert source.count('seed.dac.Init(dac_cfg);') == 1


class TestMemberNames:
    """Test the generated member names that labels must not reuse."""

    def test_empty_description(self):
        assert member_names({}) == [
            'seed', 'Init', 'ProcessAnalogControls', 'ProcessDigitalControls',
            'ProcessAllControls', 'UpdateLeds',
        ]

    def test_present_kinds_only(self):
        names = member_names({'leds': [{'pin': 1}]})
        assert 'leds' in names
        assert 'switches' not in names
        assert 'controls' not in names

    def test_cv_inputs_alone_declare_controls(self):
        assert 'controls' in member_names({'cv_inputs': [{'pin': 21}]})

    def test_encoder_shortcut(self):
        names = member_names({'encoders': [{}, {}]})
        assert names.count('encoders') == 1
        assert 'encoder' in names

    def test_display_instances(self):
        names = member_names({'oled_displays': [{}, {}, {}]})
        assert ['display', 'display1', 'display2'] == [n for n in names if n.startswith('display')]

    def test_every_name_declared_in_source(self):
        source = generate_hardware_source(FULL_DESCRIPTION)
        for name in member_names(FULL_DESCRIPTION):
            assert re.search(rf' {name}(\[\d+\];| =|;|\()', source), name
