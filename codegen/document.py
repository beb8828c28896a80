"""
Hardware description documents.

The description is kept as the plain dict decoded from JSON. Nothing here
validates it against the schema; these helpers only read it.
"""

import json
from collections import Counter
from typing import Dict, List

from codegen.hardware import member_names
from codegen.peripherals import KIND_ORDER, MAX_CV_OUTPUTS, PERIPHERALS


DOCUMENT_KEYS = [key for kind in KIND_ORDER for key in PERIPHERALS[kind].document_keys]

# Keys whose entry labels become struct members
LABELED_KEYS = ['analog_controls', 'cv_inputs', 'encoders', 'gate_inputs', 'leds', 'rgb_leds', 'switches']


def parse_description(text: str) -> Dict:
    """
    Decode a hardware description from JSON text.

    Raises:
        ValueError: If the text is not JSON or its top level is not an object
    """
    if not text or not text.strip():
        raise ValueError("Empty hardware description")
    try:
        description = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Hardware description is not valid JSON: {e}") from e
    if not isinstance(description, dict):
        raise ValueError(
            f"Hardware description must be a JSON object, got {type(description).__name__}"
        )
    return description


def peripheral_counts(description: Dict) -> Dict[str, int]:
    """Number of entries listed under each document key."""
    return {key: len(description.get(key) or []) for key in DOCUMENT_KEYS}


def generation_notes(description: Dict) -> List[str]:
    """
    Non-fatal observations about a description.

    Reports CV outputs dropped for lack of DAC channels, labels bound to
    more than one slot and labels reusing a member the header already
    declares. Notes never change the generated source.
    """
    notes = []

    cv_outputs = description.get('cv_outputs') or []
    if len(cv_outputs) > MAX_CV_OUTPUTS:
        notes.append(
            f"{len(cv_outputs)} cv_outputs listed but only {MAX_CV_OUTPUTS} DAC channels "
            f"are available; the extra {len(cv_outputs) - MAX_CV_OUTPUTS} are ignored."
        )

    generated = set(member_names(description))
    labels = Counter()
    for key in LABELED_KEYS:
        for entry in description.get(key) or []:
            labels.update(entry.get('labels') or [])
    for label, count in labels.items():
        if label in generated:
            notes.append(
                f"Label '{label}' reuses the name of a generated member (duplicate struct members)."
            )
        if count > 1:
            notes.append(f"Label '{label}' is bound {count} times (duplicate struct members).")

    return notes
