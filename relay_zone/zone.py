"""
Zone Allowance Module
=====================

Bounded Context: Which labeled points a zone is supposed to contain.

Design:
- Zones are nested: zone 2 also covers zone 1 faults, zone 3 covers all
- Pure logic, no geometry
- Unknown labels (0, negative, > 3) are never supposed to be inside
"""

ZONES = (1, 2, 3)


def is_zone_allowed(point_zone: int, target_zone: int) -> bool:
    """
    Decide whether a point labeled point_zone should fall inside target_zone.

    Args:
        point_zone: Label of the data point
        target_zone: Zone being fitted

    Returns:
        True if the point belongs inside the target zone's characteristic
    """
    if point_zone not in ZONES:
        return False
    if point_zone == target_zone:
        return True
    if target_zone == 3:
        return True
    if target_zone == 2 and point_zone == 1:
        return True
    return False
