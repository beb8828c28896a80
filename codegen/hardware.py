"""
Custom hardware header generation.

Turns a hardware description (the JSON document listing the knobs, switches,
LEDs, displays ... of a Daisy Seed build) into a C++ header declaring one
struct that owns every peripheral, brings them up in Init() and services
them in the per-tick routines.

Generation is a single pure pass: the same description always produces the
same text, and nothing in the description is checked or modified.
"""

import logging
import textwrap
from typing import Dict, List, Optional

from codegen.peripherals import KIND_ORDER, PeripheralKind, collect_entries, generate_fragment, get_peripheral
from codegen.phases import Phase

logger = logging.getLogger(__name__)


DEFAULT_STRUCT_NAME = 'Daisy'

MEMBER_INDENT = ' ' * 4
BODY_INDENT = ' ' * 8

SEED_MEMBER = 'seed'
INIT_ROUTINE = 'Init'
ALL_CONTROLS_ROUTINE = 'ProcessAllControls'

# Per-tick routines and the kinds serviced by each, in emission order
PROCESSING_ROUTINES = [
    ('ProcessAnalogControls', [PeripheralKind.ANALOG_CONTROL]),
    ('ProcessDigitalControls', [PeripheralKind.ENCODER, PeripheralKind.SWITCH]),
]
# LEDs are refreshed separately from control processing
LED_ROUTINE = ('UpdateLeds', [PeripheralKind.LED, PeripheralKind.RGB_LED])


def member_names(description: Dict) -> List[str]:
    """
    Every struct member the generated header declares for a description,
    user labels excluded: the seed handle, peripheral arrays and display
    instances of the kinds present, and the routines.
    """
    description = description or {}
    names = [SEED_MEMBER]
    for kind in KIND_ORDER:
        names.extend(get_peripheral(kind).members(collect_entries(description, kind)))
    names.append(INIT_ROUTINE)
    names.extend(name for name, _ in PROCESSING_ROUTINES)
    names.append(ALL_CONTROLS_ROUTINE)
    names.append(LED_ROUTINE[0])
    return names


def generate_phase(description: Dict, phase, kinds: Optional[List[PeripheralKind]] = None) -> List[str]:
    """
    Non-empty fragments for one phase, in declaration order.

    Args:
        description: Hardware description dict (missing kinds count as empty)
        phase: Phase to generate
        kinds: Restrict to these kinds (still emitted in KIND_ORDER)

    Returns:
        List of fragments, each a newline-joined block without indentation
    """
    fragments = []
    for kind in KIND_ORDER:
        if kinds is not None and kind not in kinds:
            continue
        fragment = generate_fragment(kind, collect_entries(description, kind), phase)
        if fragment:
            fragments.append(fragment)
    return fragments


def _block(fragments: List[str], indent: str) -> List[str]:
    """Indent fragments and separate them with blank lines."""
    lines = []
    for i, fragment in enumerate(fragments):
        if i:
            lines.append('')
        lines.extend(textwrap.indent(fragment, indent).splitlines())
    return lines


def _routine(signature: str, body: List[str]) -> List[str]:
    return [
        f'{MEMBER_INDENT}{signature}',
        f'{MEMBER_INDENT}{{',
        *body,
        f'{MEMBER_INDENT}}}',
        '',
    ]


def generate_hardware_source(description: Dict, struct_name: str = DEFAULT_STRUCT_NAME) -> str:
    """
    Generate the complete custom hardware header.

    Layout:
        includes, `typedef struct {` with the seed handle and every peripheral
        declaration, Init(bool boost), ProcessAnalogControls(),
        ProcessDigitalControls(), ProcessAllControls(), UpdateLeds(),
        `} <struct_name>;`
    """
    description = description or {}

    lines = [
        '// File was generated, do not edit!',
        '#pragma once',
        '',
        '#include "daisy_seed.h"',
    ]
    lines.extend(generate_phase(description, Phase.INCLUDE))
    lines.extend([
        '',
        'using namespace daisy;',
        '',
        'typedef struct {',
        f'{MEMBER_INDENT}DaisySeed {SEED_MEMBER};',
        '',
    ])

    declarations = generate_phase(description, Phase.DECLARATION)
    if declarations:
        lines.extend(_block(declarations, MEMBER_INDENT))
        lines.append('')

    init_body = [
        f'{BODY_INDENT}{SEED_MEMBER}.Configure();',
        f'{BODY_INDENT}{SEED_MEMBER}.Init(boost);',
    ]
    initializations = generate_phase(description, Phase.INITIALIZATION)
    if initializations:
        init_body.append('')
        init_body.extend(_block(initializations, BODY_INDENT))
    lines.extend(_routine(f'void {INIT_ROUTINE}(bool boost)', init_body))

    for name, kinds in PROCESSING_ROUTINES:
        body = _block(generate_phase(description, Phase.PROCESSING, kinds), BODY_INDENT)
        lines.extend(_routine(f'void {name}()', body))

    lines.extend(_routine(f'inline void {ALL_CONTROLS_ROUTINE}()', [
        f'{BODY_INDENT}{name}();' for name, _ in PROCESSING_ROUTINES
    ]))

    name, kinds = LED_ROUTINE
    body = _block(generate_phase(description, Phase.PROCESSING, kinds), BODY_INDENT)
    lines.extend(_routine(f'void {name}()', body))

    lines.append(f'}} {struct_name};')
    lines.append('')

    logger.debug("Generated %s hardware header (%d lines, %d declaration blocks)",
                 struct_name, len(lines), len(declarations))
    return '\n'.join(lines)
