"""
NUT (Network UPS Tools) module for nut-exporter.

Provides the network protocol client and the translation of UPS variables
into labeled gauge observations.
"""

from nut_exporter.nut.client import (
    NUTClient,
    NUTConnectionError,
    NUTError,
    NUTProtocolError,
    NUTServerError,
    NUTTransportError,
)
from nut_exporter.nut.collector import NUTCollector, describe_all

__all__ = [
    "NUTClient",
    "NUTCollector",
    "NUTConnectionError",
    "NUTError",
    "NUTProtocolError",
    "NUTServerError",
    "NUTTransportError",
    "describe_all",
]
