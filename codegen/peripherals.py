"""
Peripheral generator definitions.

Each peripheral kind maps a list of configuration entries (plain dicts, as
decoded from the hardware description) to a C++ fragment for one phase.
Generated code targets libDaisy:

    https://github.com/electro-smith/libDaisy/tree/master/src/hid

A kind contributes to any subset of the four phases; phases it has nothing
for, and empty entry lists, always produce an empty string.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from codegen.naming import driver_names, instance_name, label_aliases
from codegen.phases import Phase, PHASE_ORDER

logger = logging.getLogger(__name__)


# The Daisy Seed exposes two DAC channels
MAX_CV_OUTPUTS = 2

SSD130X_DRIVER = 'SSD130x'
SSD130X_INCLUDE = '#include "dev/oled_ssd130x.h"'

TRANSPORT_4WIRE_SPI = '4WireSpi'
TRANSPORT_I2C = 'I2c'


class PeripheralKind(str, Enum):
    ANALOG_CONTROL = "analog_control"
    CV_OUTPUT = "cv_output"
    ENCODER = "encoder"
    GATE_INPUT = "gate_input"
    GATE_OUTPUT = "gate_output"
    LED = "led"
    MIDI_HANDLER = "midi_handler"
    OLED_DISPLAY = "oled_display"
    RGB_LED = "rgb_led"
    SWITCH = "switch"


def _empty(entries: List[Dict]) -> str:
    return ''


def _no_members(entries: List[Dict]) -> List[str]:
    return []


@dataclass
class PeripheralDefinition:
    """A peripheral kind and its per-phase generators."""
    kind: PeripheralKind
    description: str
    document_keys: List[str]  # merged in this order into one index space
    include: Callable[[List[Dict]], str] = _empty
    declare: Callable[[List[Dict]], str] = _empty
    initialize: Callable[[List[Dict]], str] = _empty
    process: Callable[[List[Dict]], str] = _empty
    # Struct member names the declarations introduce, labels excluded
    members: Callable[[List[Dict]], List[str]] = _no_members

    def generator_for(self, phase: Phase) -> Callable[[List[Dict]], str]:
        if phase == Phase.INCLUDE:
            return self.include
        if phase == Phase.DECLARATION:
            return self.declare
        if phase == Phase.INITIALIZATION:
            return self.initialize
        if phase == Phase.PROCESSING:
            return self.process
        raise ValueError(f"Unknown phase '{phase}'. Available: {[p.value for p in PHASE_ORDER]}")

    def phases(self) -> List[Phase]:
        """Phases this kind can contribute to."""
        return [p for p in PHASE_ORDER if self.generator_for(p) is not _empty]


# --- Rendering helpers ---

def _field(entry: Dict, key: str) -> str:
    """Render a scalar field; a missing field renders empty."""
    value = entry.get(key)
    if value is None:
        return ''
    return str(value)


def _flag(entry: Dict, key: str) -> str:
    return 'true' if entry.get(key) else 'false'


def _pin(entry: Dict, key: str = 'pin') -> str:
    return f'seed.GetPin({_field(entry, key)})'


def _declare_array(type_name: str, array_name: str, entries: List[Dict],
                   extra: Optional[List[str]] = None) -> str:
    """Fixed-size array of HID objects followed by label aliases."""
    lines = [
        f'// {array_name} declaration',
        f'{type_name} {array_name}[{len(entries)}];',
    ]
    lines.extend(extra or [])
    lines.extend(label_aliases(type_name, array_name, entries))
    return '\n'.join(lines)


def _bracket(array_name: str, body: List[str]) -> str:
    return '\n'.join(
        [f'// BEGIN - {array_name} initialization']
        + body
        + [f'// END - {array_name} initialization']
    )


def _process_each(array_name: str, entries: List[Dict], method: str) -> str:
    lines = [f'// process {array_name}']
    lines.extend(f'{array_name}[{idx}].{method}();' for idx in range(len(entries)))
    return '\n'.join(lines)


def _array_member(array_name: str, *extra: str) -> Callable[[List[Dict]], List[str]]:
    def members(entries: List[Dict]) -> List[str]:
        return [array_name, *extra] if entries else []
    return members


# --- Analog controls (analog_controls + cv_inputs share one array) ---

def _declare_analog_controls(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _declare_array('AnalogControl', 'controls', entries)


def _initialize_analog_controls(entries: List[Dict]) -> str:
    if not entries:
        return ''
    count = len(entries)
    body = [f'AdcChannelConfig cfg[{count}];']
    # Channel configs first, the ADC is initialized once for all of them
    for idx, entry in enumerate(entries):
        body.append(f'cfg[{idx}].InitSingle({_pin(entry)});')
    body.append(f'seed.adc.Init(cfg, {count});')
    for idx, entry in enumerate(entries):
        body.append(
            f'controls[{idx}].Init(seed.adc.GetPtr({idx}), seed.AudioCallbackRate(), '
            f'{_flag(entry, "flip")}, {_flag(entry, "invert")});'
        )
    body.append('seed.adc.Start();')
    return _bracket('controls', body)


def _process_analog_controls(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _process_each('controls', entries, 'Process')


# --- CV outputs (DAC) ---

def _initialize_cv_outputs(entries: List[Dict]) -> str:
    if not entries:
        return ''
    # Both channels are brought up together; per-output settings are not exposed
    return _bracket('cv_outputs', [
        'DacHandle::Config dac_cfg;',
        'dac_cfg.bitdepth   = DacHandle::BitDepth::BITS_12;',
        'dac_cfg.buff_state = DacHandle::BufferState::ENABLED;',
        'dac_cfg.mode       = DacHandle::Mode::POLLING;',
        'dac_cfg.chn        = DacHandle::Channel::BOTH;',
        'seed.dac.Init(dac_cfg);',
        'seed.dac.WriteValue(DacHandle::Channel::BOTH, 0);',
    ])


# --- Encoders ---

# First encoder is also reachable without indexing
ENCODER_SHORTCUT = instance_name('encoder', 0)


def _declare_encoders(entries: List[Dict]) -> str:
    if not entries:
        return ''
    convenience = f'Encoder& {ENCODER_SHORTCUT} = encoders[0];'
    return _declare_array('Encoder', 'encoders', entries, extra=[convenience])


def _initialize_encoders(entries: List[Dict]) -> str:
    if not entries:
        return ''
    body = [
        f'encoders[{idx}].Init({_pin(e, "pin_a")}, {_pin(e, "pin_b")}, '
        f'{_pin(e, "pin_switch")}, seed.AudioCallbackRate());'
        for idx, e in enumerate(entries)
    ]
    return _bracket('encoders', body)


def _process_encoders(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _process_each('encoders', entries, 'Debounce')


# --- Switches ---

def _declare_switches(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _declare_array('Switch', 'switches', entries)


def _initialize_switches(entries: List[Dict]) -> str:
    if not entries:
        return ''
    # Enum names are passed through as written in the description
    body = [
        f'switches[{idx}].Init({_pin(e)}, seed.AudioCallbackRate(), '
        f'Switch::Type::{_field(e, "type")}, '
        f'Switch::Polarity::{_field(e, "polarity")}, '
        f'Switch::Pull::{_field(e, "pull")});'
        for idx, e in enumerate(entries)
    ]
    return _bracket('switches', body)


def _process_switches(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _process_each('switches', entries, 'Debounce')


# --- LEDs ---

def _declare_leds(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _declare_array('Led', 'leds', entries)


def _initialize_leds(entries: List[Dict]) -> str:
    if not entries:
        return ''
    body = [
        f'leds[{idx}].Init({_pin(e)}, {_flag(e, "invert")});'
        for idx, e in enumerate(entries)
    ]
    return _bracket('leds', body)


def _process_leds(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _process_each('leds', entries, 'Update')


# --- RGB LEDs ---

def _declare_rgb_leds(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _declare_array('RgbLed', 'rgb_leds', entries)


def _initialize_rgb_leds(entries: List[Dict]) -> str:
    if not entries:
        return ''
    body = [
        f'rgb_leds[{idx}].Init({_pin(e, "pin_r")}, {_pin(e, "pin_g")}, '
        f'{_pin(e, "pin_b")}, {_flag(e, "invert")});'
        for idx, e in enumerate(entries)
    ]
    return _bracket('rgb_leds', body)


def _process_rgb_leds(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _process_each('rgb_leds', entries, 'Update')


# --- Gate inputs ---

def _declare_gate_inputs(entries: List[Dict]) -> str:
    if not entries:
        return ''
    return _declare_array('GateIn', 'gate_inputs', entries)


def _initialize_gate_inputs(entries: List[Dict]) -> str:
    if not entries:
        return ''
    # One pin handle is rebound for every gate input
    body = ['dsy_gpio_pin gate_input_pin;']
    for idx, entry in enumerate(entries):
        body.append(f'gate_input_pin = {_pin(entry)};')
        body.append(f'gate_inputs[{idx}].Init(&gate_input_pin);')
    return _bracket('gate_inputs', body)


# --- OLED displays ---

def _include_oled_displays(entries: List[Dict]) -> str:
    if any(d.get('driver') == SSD130X_DRIVER for d in entries):
        return SSD130X_INCLUDE
    return ''


def _display_names(entries: List[Dict]) -> List[str]:
    return [instance_name('display', idx) for idx in range(len(entries))]


def _declare_oled_displays(entries: List[Dict]) -> str:
    if not entries:
        return ''
    lines = ['// oled_displays declaration']
    for member, name in zip(_display_names(entries), driver_names(entries)):
        lines.append(f'OledDisplay<{name}> {member};')
    return '\n'.join(lines)


def _display_transport_lines(config: str, display: Dict) -> List[str]:
    transport = display.get('transport')
    prefix = f'{config}.driver_config.transport_config'
    if transport == TRANSPORT_4WIRE_SPI:
        spi = display.get('4_wire_spi_config') or {}
        return [
            f'{prefix}.pin_config.dc = {_pin(spi, "pin_dc")};',
            f'{prefix}.pin_config.reset = {_pin(spi, "pin_reset")};',
        ]
    if transport == TRANSPORT_I2C:
        i2c = display.get('i2c_config') or {}
        return [
            f'{prefix}.i2c_address = {_field(i2c, "address")};',
            f'{prefix}.i2c_config.periph = I2CHandle::Config::Peripheral::{_field(i2c, "peripheral")};',
            f'{prefix}.i2c_config.speed = I2CHandle::Config::Speed::{_field(i2c, "speed")};',
            f'{prefix}.i2c_config.pin_config.sda = {_pin(i2c, "pin_sda")};',
            f'{prefix}.i2c_config.pin_config.scl = {_pin(i2c, "pin_scl")};',
        ]
    return []


def _initialize_oled_displays(entries: List[Dict]) -> str:
    if not entries:
        return ''
    body = []
    members = _display_names(entries)
    for idx, (display, name) in enumerate(zip(entries, driver_names(entries))):
        config = f'display_config{idx}'
        body.append(f'// Display {idx}')
        body.append(f'OledDisplay<{name}>::Config {config};')
        body.extend(_display_transport_lines(config, display))
        body.append(f'{members[idx]}.Init({config});')
    return _bracket('oled_displays', body)


PERIPHERALS: Dict[PeripheralKind, PeripheralDefinition] = {
    PeripheralKind.ANALOG_CONTROL: PeripheralDefinition(
        kind=PeripheralKind.ANALOG_CONTROL,
        description='Potentiometers and CV inputs read through the ADC (AnalogControl)',
        document_keys=['analog_controls', 'cv_inputs'],
        declare=_declare_analog_controls,
        initialize=_initialize_analog_controls,
        process=_process_analog_controls,
        members=_array_member('controls'),
    ),
    PeripheralKind.CV_OUTPUT: PeripheralDefinition(
        kind=PeripheralKind.CV_OUTPUT,
        description='CV outputs driven by the two-channel DAC',
        document_keys=['cv_outputs'],
        initialize=_initialize_cv_outputs,
    ),
    PeripheralKind.ENCODER: PeripheralDefinition(
        kind=PeripheralKind.ENCODER,
        description='Rotary encoders with push switch (Encoder)',
        document_keys=['encoders'],
        declare=_declare_encoders,
        initialize=_initialize_encoders,
        process=_process_encoders,
        members=_array_member('encoders', ENCODER_SHORTCUT),
    ),
    PeripheralKind.GATE_INPUT: PeripheralDefinition(
        kind=PeripheralKind.GATE_INPUT,
        description='Gate/trigger inputs (GateIn)',
        document_keys=['gate_inputs'],
        declare=_declare_gate_inputs,
        initialize=_initialize_gate_inputs,
        members=_array_member('gate_inputs'),
    ),
    PeripheralKind.GATE_OUTPUT: PeripheralDefinition(
        kind=PeripheralKind.GATE_OUTPUT,
        description='Gate outputs (reserved, generates no code)',
        document_keys=['gate_outputs'],
    ),
    PeripheralKind.LED: PeripheralDefinition(
        kind=PeripheralKind.LED,
        description='Single-colour LEDs (Led)',
        document_keys=['leds'],
        declare=_declare_leds,
        initialize=_initialize_leds,
        process=_process_leds,
        members=_array_member('leds'),
    ),
    PeripheralKind.MIDI_HANDLER: PeripheralDefinition(
        kind=PeripheralKind.MIDI_HANDLER,
        description='MIDI handlers (reserved, generates no code)',
        document_keys=['midi_handlers'],
    ),
    PeripheralKind.OLED_DISPLAY: PeripheralDefinition(
        kind=PeripheralKind.OLED_DISPLAY,
        description='OLED displays over 4-wire SPI or I2C (OledDisplay)',
        document_keys=['oled_displays'],
        include=_include_oled_displays,
        declare=_declare_oled_displays,
        initialize=_initialize_oled_displays,
        members=_display_names,
    ),
    PeripheralKind.RGB_LED: PeripheralDefinition(
        kind=PeripheralKind.RGB_LED,
        description='RGB LEDs (RgbLed)',
        document_keys=['rgb_leds'],
        declare=_declare_rgb_leds,
        initialize=_initialize_rgb_leds,
        process=_process_rgb_leds,
        members=_array_member('rgb_leds'),
    ),
    PeripheralKind.SWITCH: PeripheralDefinition(
        kind=PeripheralKind.SWITCH,
        description='Momentary and toggle switches (Switch)',
        document_keys=['switches'],
        declare=_declare_switches,
        initialize=_initialize_switches,
        process=_process_switches,
        members=_array_member('switches'),
    ),
}

# Declaration and initialization order in the generated struct
KIND_ORDER = [
    PeripheralKind.ANALOG_CONTROL,
    PeripheralKind.CV_OUTPUT,
    PeripheralKind.ENCODER,
    PeripheralKind.GATE_INPUT,
    PeripheralKind.GATE_OUTPUT,
    PeripheralKind.LED,
    PeripheralKind.MIDI_HANDLER,
    PeripheralKind.OLED_DISPLAY,
    PeripheralKind.RGB_LED,
    PeripheralKind.SWITCH,
]


def get_peripheral(kind) -> PeripheralDefinition:
    """Get a peripheral definition by kind (enum member or its value)."""
    try:
        kind = PeripheralKind(kind)
    except ValueError:
        raise ValueError(
            f"Unknown peripheral kind '{kind}'. Available: {[k.value for k in PeripheralKind]}"
        ) from None
    return PERIPHERALS[kind]


def list_peripherals() -> List[Dict]:
    """List all peripheral kinds in generation order."""
    result = []
    for kind in KIND_ORDER:
        definition = PERIPHERALS[kind]
        result.append({
            'kind': kind.value,
            'description': definition.description,
            'document_keys': list(definition.document_keys),
            'phases': [p.value for p in definition.phases()],
        })
    return result


def collect_entries(description: Dict, kind) -> List[Dict]:
    """
    Entries of one kind from a hardware description, in index order.

    Kinds spanning several document keys are concatenated in key order, and
    CV outputs are cut down to the available DAC channels.
    """
    definition = get_peripheral(kind)
    entries: List[Dict] = []
    for key in definition.document_keys:
        entries.extend(description.get(key) or [])
    if definition.kind == PeripheralKind.CV_OUTPUT and len(entries) > MAX_CV_OUTPUTS:
        logger.debug("Dropping %d cv_outputs beyond the %d DAC channels",
                     len(entries) - MAX_CV_OUTPUTS, MAX_CV_OUTPUTS)
        entries = entries[:MAX_CV_OUTPUTS]
    return entries


def generate_fragment(kind, entries: List[Dict], phase) -> str:
    """Generate the fragment one peripheral kind contributes to one phase."""
    definition = get_peripheral(kind)
    return definition.generator_for(Phase(phase))(list(entries or []))
