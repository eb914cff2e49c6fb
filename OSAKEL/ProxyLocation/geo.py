# file: OSAKEL/ProxyLocation/geo.py
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

EARTH_RADIUS_KM = 6371


# ==============================
# Utilities
# ==============================
def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return distance in km between two lat/lon points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def shop_coordinates(data: dict) -> Optional[Tuple[float, float]]:
    """(lat, lng) from plain fields, or from a ``location`` geo-point."""
    lat, lng = data.get("lat"), data.get("lng")
    if lat is not None and lng is not None:
        return float(lat), float(lng)

    location = data.get("location")
    if location is not None:
        lat = getattr(location, "latitude", None)
        lng = getattr(location, "longitude", None)
        if lat is not None and lng is not None:
            return float(lat), float(lng)
    return None


# ==============================
# Proximity
# ==============================
@dataclass
class ProximityMatch:
    id: str
    name: str
    distance_km: float
    within_range: bool


def classify_by_distance(
    reference: Tuple[float, float],
    candidates: Iterable[Dict],
    threshold_km: float,
) -> List[ProximityMatch]:
    """
    One match per candidate that has coordinates; ``within_range`` includes
    the threshold itself.
    """
    ref_lat, ref_lng = reference
    matches = []
    for candidate in candidates:
        coords = shop_coordinates(candidate)
        if coords is None:
            continue
        distance = haversine(ref_lat, ref_lng, coords[0], coords[1])
        matches.append(ProximityMatch(
            id=candidate.get("id", ""),
            name=candidate.get("name", ""),
            distance_km=distance,
            within_range=distance <= threshold_km,
        ))
    return matches


def filter_within_range(
    reference: Tuple[float, float],
    candidates: Iterable[Dict],
    threshold_km: float,
) -> List[ProximityMatch]:
    return [m for m in classify_by_distance(reference, candidates, threshold_km) if m.within_range]
