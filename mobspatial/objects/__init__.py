"""Layer 1: Objects - Immutable data representations.

This layer contains only data structures. Only standard library + numpy +
pandas.
"""

from mobspatial.objects.zoneset import ZoneSet

__all__ = ["ZoneSet"]
