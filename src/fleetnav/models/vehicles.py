"""Vehicle classes and their fuel/priority characteristics."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_FUEL_RATE = 8.0


@dataclass(frozen=True, slots=True)
class VehicleProfile:
    name: str
    fuel_rate_l_per_100km: float
    emergency: bool = False


VEHICLE_PROFILES: dict[str, VehicleProfile] = {
    "ambulance": VehicleProfile("ambulance", 12.0, emergency=True),
    "fire": VehicleProfile("fire", 15.0, emergency=True),
    "police": VehicleProfile("police", 10.0, emergency=True),
    "bus": VehicleProfile("bus", 25.0),
    "car": VehicleProfile("car", 8.0),
    "motorcycle": VehicleProfile("motorcycle", 4.0),
}

SUPPORTED_VEHICLE_TYPES: tuple[str, ...] = tuple(VEHICLE_PROFILES)


def resolve_vehicle_profile(name: str | None) -> VehicleProfile:
    """Return the profile for ``name``, falling back to a generic non-emergency vehicle."""

    profile = VEHICLE_PROFILES.get((name or "").strip().lower())
    if profile is not None:
        return profile
    logger.warning("Unknown vehicle type %r, using default fuel rate %.1f L/100km", name, DEFAULT_FUEL_RATE)
    return VehicleProfile(name or "unknown", DEFAULT_FUEL_RATE)

