"""
nut-exporter: Prometheus exporter for Network UPS Tools.

Polls one or more NUT daemons over the NUT network protocol and exposes
UPS variables as labeled gauges.
"""

__version__ = "0.1.0"
