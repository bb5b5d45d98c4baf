"""
Data models for NUT (Network UPS Tools) metrics.

This module defines the Pydantic models describing exported metrics and
the observations produced from UPS variables polled from a NUT server.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class MetricDescriptor(BaseModel):
    """
    Identity of one exported metric, keyed by the NUT variable it comes from.

    The unit is part of the name (``_volts``, ``_percent``, ``_seconds``...).
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="NUT variable name, e.g. battery.charge")
    name: str = Field(description="Metric name without namespace, e.g. battery_charge_percent")
    description: str
    kind: str = "gauge"


class UPSLabels(BaseModel):
    """
    Labels attached to every observation of a UPS.

    Validated straight from a UPS variable set; missing variables default
    to an empty string.
    """

    model_config = ConfigDict(frozen=True)

    model: str = Field("", alias="device.model")
    mfr: str = Field("", alias="device.mfr")
    serial: str = Field("", alias="device.serial")
    type: str = Field("", alias="device.type")


LABEL_NAMES = tuple(UPSLabels.model_fields)
LABEL_KEYS = frozenset(field.alias for field in UPSLabels.model_fields.values())


class Observation(BaseModel):
    """One labeled value for one metric."""

    name: str
    value: float
    labels: Dict[str, str]
    kind: str = "gauge"
