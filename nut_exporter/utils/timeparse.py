import re

_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}


def parse_duration(time_str: str) -> float:
    """
    Parse a duration string like '500ms', '15s', '10m', '1h' into seconds.

    A bare number is taken as seconds.
    """
    if not isinstance(time_str, str):
        raise ValueError("Invalid time string format")

    match = re.fullmatch(r"\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*", time_str)
    if not match:
        raise ValueError(f"Invalid time string format: {time_str!r}")

    value, unit = match.groups()
    seconds = float(value) * _UNITS[unit or "s"]
    if seconds <= 0:
        raise ValueError("Duration must be greater than zero")
    return seconds
