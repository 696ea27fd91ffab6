"""Action strategies for the smart room.

This module provides the rules that map readings to device actions:
- PresenceLight: Light on when occupied and dark
- Cooling: Fan on at or above a temperature threshold
"""

from smartroom.strategies.cooling import CoolingStrategy
from smartroom.strategies.presence_light import PresenceLightStrategy

__all__ = [
    "PresenceLightStrategy",
    "CoolingStrategy",
]
