"""Telemetry helpers for generation runs."""

from .logger import RunLogger

__all__ = ["RunLogger"]
