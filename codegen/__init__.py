"""
SeedForge Code Generator

Turns a hardware description of a Daisy Seed based control surface into the
C++ header that declares, initializes and services its peripherals.

Generation is a pure text transform — nothing is validated, compiled or run.
"""

from codegen.phases import Phase, PHASE_ORDER
from codegen.naming import instance_name, label_aliases, driver_name, driver_names
from codegen.peripherals import PeripheralKind, get_peripheral, list_peripherals, collect_entries, generate_fragment
from codegen.hardware import generate_hardware_source, generate_phase, member_names
from codegen.document import parse_description, peripheral_counts, generation_notes

__version__ = "0.1.0"
