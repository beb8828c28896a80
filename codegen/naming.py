"""
Identifier derivation shared by the peripheral generators.

- instance_name: first instance keeps the bare name, later ones get their index
- label_aliases: user labels bound as extra references to array slots
- driver_name / driver_names: OledDisplay driver type selector
"""

from typing import Dict, List


DRIVER_SUFFIX = 'Driver'


def instance_name(base: str, index: int) -> str:
    """Name of the index-th instance: 'display', 'display1', 'display2', ..."""
    if index == 0:
        return base
    return f'{base}{index}'


def label_aliases(type_name: str, array_name: str, entries: List[Dict]) -> List[str]:
    """
    Emit one reference declaration per user label.

    Labels are bound in entry order, then label order. Duplicates are not
    detected here; a clash shows up when the generated header is compiled.
    """
    lines = []
    for idx, entry in enumerate(entries):
        for label in entry.get('labels') or []:
            lines.append(f'{type_name}& {label} = {array_name}[{idx}];')
    return lines


def driver_name(display: Dict) -> str:
    """
    Compose the libDaisy driver type for a display, e.g. SSD130xI2c128x64Driver.

    The parts are concatenated verbatim; they have to match the driver
    typedefs of the hardware library exactly.
    """
    parts = [display.get('driver'), display.get('transport'), display.get('dimensions')]
    return ''.join(str(p) for p in parts if p is not None) + DRIVER_SUFFIX


def driver_names(displays: List[Dict]) -> List[str]:
    """Driver type for every display, parallel to the input list."""
    return [driver_name(d) for d in displays]
