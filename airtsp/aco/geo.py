import math
from dataclasses import dataclass

import numpy as np

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coord:
    """Latitude/longitude pair in radians."""
    lat: float
    lon: float

    @classmethod
    def from_degrees(cls, lat, lon):
        return cls(math.radians(lat), math.radians(lon))

    @classmethod
    def from_dms(cls, lat_dms, lon_dms):
        """Build from ((deg, min, sec, hemisphere), (deg, min, sec, hemisphere)) tuples."""
        return cls.from_degrees(dms_to_degrees(*lat_dms), dms_to_degrees(*lon_dms))

    def to_degrees(self):
        return math.degrees(self.lat), math.degrees(self.lon)


def dms_to_degrees(degrees, minutes, seconds, hemisphere="N"):
    value = degrees + minutes / 60.0 + seconds / 3600.0
    return -value if hemisphere in ("S", "W") else value


def degrees_to_dms(value, positive="N", negative="S"):
    hemisphere = positive if value >= 0 else negative
    value = abs(value)
    degrees = int(value)
    minutes_full = (value - degrees) * 60.0
    minutes = int(minutes_full)
    seconds = (minutes_full - minutes) * 60.0
    # carry rounding overflow so we never print 60.00 seconds
    if round(seconds, 2) >= 60.0:
        seconds = 0.0
        minutes += 1
    if minutes >= 60:
        minutes = 0
        degrees += 1
    return degrees, minutes, seconds, hemisphere


def great_circle(coord1, coord2, radius=EARTH_RADIUS_KM):
    """Haversine distance between two radian coordinates."""
    sin_lat2 = math.sin((coord2.lat - coord1.lat) * 0.5)
    sin_lon2 = math.sin((coord2.lon - coord1.lon) * 0.5)

    a = sin_lat2 * sin_lat2 + sin_lon2 * sin_lon2 * math.cos(coord1.lat) * math.cos(coord2.lat)
    a = min(max(a, 0.0), 1.0)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return c * radius


def great_circle_pairs(lat1, lon1, lat2, lon2, radius=EARTH_RADIUS_KM):
    """Vectorized haversine over matching arrays of radian coordinates."""
    sin_lat2 = np.sin((lat2 - lat1) * 0.5)
    sin_lon2 = np.sin((lon2 - lon1) * 0.5)

    a = sin_lat2 * sin_lat2 + sin_lon2 * sin_lon2 * np.cos(lat1) * np.cos(lat2)
    # rounding can push a marginally outside [0, 1] for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return c * radius
