# simulator/errors.py
from __future__ import annotations


class SimulationError(Exception):
    """Base class for rejected commands. State is unchanged when raised."""


class NotFound(SimulationError, LookupError):
    pass


class InvalidArgument(SimulationError, ValueError):
    pass


class Conflict(SimulationError):
    pass
