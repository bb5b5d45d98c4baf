"""
Translation of UPS variables into observations.

Every registered variable yields exactly one observation per UPS, so the
set of exported series stays the same across polls and UPS models.
"""

import re
from typing import Dict, List, Mapping, Optional

from .models import LABEL_KEYS, Observation, UPSLabels
from .registry import (
    BEEPER_STATUS,
    BEEPER_STATUS_KEY,
    CHARGER_STATUS,
    CHARGER_STATUS_KEY,
    DESCRIPTORS,
    UNKNOWN_STATUS,
)

STATUS_TABLES = {
    BEEPER_STATUS_KEY: BEEPER_STATUS,
    CHARGER_STATUS_KEY: CHARGER_STATUS,
}

# Plain ASCII decimals with optional exponent, plus inf/infinity/nan.
_NUMBER = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def parse_number(raw: str) -> Optional[float]:
    """Return the value of a NUT numeric string, or None if it is not one."""
    if not _NUMBER.fullmatch(raw):
        return None
    return float(raw)


def translate(variables: Mapping[str, str]) -> List[Observation]:
    """
    Convert the variables of one UPS into one observation per registered metric.

    Registered variables the UPS does not report, or reports with a value
    that is not a number, are emitted as 0. Status variables map to their
    enumerated code, or to UNKNOWN_STATUS for unrecognized values.

    Args:
        variables: The UPS variables, as returned by NUTClient.list_vars.

    Returns:
        The observations, in registry order.
    """
    values: Dict[str, float] = {key: 0.0 for key in DESCRIPTORS}

    for key, raw in variables.items():
        if key in LABEL_KEYS:
            continue
        if key in STATUS_TABLES:
            values[key] = STATUS_TABLES[key].get(raw, UNKNOWN_STATUS)
            continue
        if key not in DESCRIPTORS:
            continue
        value = parse_number(raw)
        if value is not None:
            values[key] = value

    labels = UPSLabels.model_validate(variables).model_dump()
    return [
        Observation(
            name=descriptor.name,
            value=values[key],
            labels=dict(labels),
            kind=descriptor.kind,
        )
        for key, descriptor in DESCRIPTORS.items()
    ]
