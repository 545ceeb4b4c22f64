"""
Relay Zone Errors
=================

Exception hierarchy for the fitting engine.

Design:
- One base class so callers can catch everything the engine raises
- Subclass ValueError: both errors describe bad input, not bad state
- Ordering violations are NOT exceptions (soft fitness penalty)
"""


class RelayZoneError(Exception):
    """Base class for all relay zone errors."""


class DomainError(RelayZoneError, ValueError):
    """
    Angle parameter outside the open interval (0°, 90°).

    The characteristic uses tan(distCharAngle), tan(a1Angle) and
    tan(a2Angle); at 0° or 90° the boundary is undefined.
    """


class EmptyDatasetError(RelayZoneError, ValueError):
    """Fit or evaluation requested with zero data points."""
