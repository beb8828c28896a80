"""
Code regions of the generated hardware header.

Every peripheral generator is asked for one fragment per phase, and the
composition driver always walks the phases in PHASE_ORDER.
"""

from enum import Enum


class Phase(str, Enum):
    INCLUDE = "include"
    DECLARATION = "declaration"
    INITIALIZATION = "initialization"
    PROCESSING = "processing"


PHASE_ORDER = [
    Phase.INCLUDE,
    Phase.DECLARATION,
    Phase.INITIALIZATION,
    Phase.PROCESSING,
]
