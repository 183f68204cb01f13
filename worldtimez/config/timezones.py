"""Curated city catalog used to look up timezones to add."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from worldtimez.core.engine import localize
from worldtimez.core.entries import TimezoneEntry
from worldtimez.utils.time_utils import now_utc


@dataclass(frozen=True)
class CityRecord:
    name: str
    country: str
    timezone: str
    population: int
    latitude: float
    longitude: float

    def to_entry(self, now: Optional[datetime] = None) -> TimezoneEntry:
        """Convert to a tracked entry carrying the zone's current offset."""
        info = localize(now or now_utc(), self.timezone)
        return TimezoneEntry(
            zone_id=self.timezone,
            display_name=f"{self.name}, {self.country}",
            city=self.name,
            country=self.country,
            population=self.population,
            utc_offset_minutes=info.utc_offset_minutes,
        )


_CITY_CATALOG: tuple[CityRecord, ...] = (
    CityRecord("Tokyo", "Japan", "Asia/Tokyo", 37400000, 35.6895, 139.6917),
    CityRecord("Delhi", "India", "Asia/Kolkata", 31000000, 28.6139, 77.2090),
    CityRecord("Shanghai", "China", "Asia/Shanghai", 27000000, 31.2304, 121.4737),
    CityRecord("Sao Paulo", "Brazil", "America/Sao_Paulo", 22000000, -23.5505, -46.6333),
    CityRecord("Mexico City", "Mexico", "America/Mexico_City", 21800000, 19.4326, -99.1332),
    CityRecord("Dhaka", "Bangladesh", "Asia/Dhaka", 21700000, 23.8103, 90.4125),
    CityRecord("Cairo", "Egypt", "Africa/Cairo", 21300000, 30.0444, 31.2357),
    CityRecord("Mumbai", "India", "Asia/Kolkata", 20400000, 19.0760, 72.8777),
    CityRecord("New York", "United States", "America/New_York", 18800000, 40.7128, -74.0060),
    CityRecord("Karachi", "Pakistan", "Asia/Karachi", 16100000, 24.8607, 67.0011),
    CityRecord("Istanbul", "Turkey", "Europe/Istanbul", 15500000, 41.0082, 28.9784),
    CityRecord("Buenos Aires", "Argentina", "America/Buenos_Aires", 15300000, -34.6037, -58.3816),
    CityRecord("Lagos", "Nigeria", "Africa/Lagos", 14800000, 6.5244, 3.3792),
    CityRecord("Moscow", "Russia", "Europe/Moscow", 12500000, 55.7558, 37.6173),
    CityRecord("Los Angeles", "United States", "America/Los_Angeles", 12400000, 34.0522, -118.2437),
    CityRecord("Paris", "France", "Europe/Paris", 11000000, 48.8566, 2.3522),
    CityRecord("London", "United Kingdom", "Europe/London", 8900000, 51.5074, -0.1278),
    CityRecord("Singapore", "Singapore", "Asia/Singapore", 5700000, 1.3521, 103.8198),
    CityRecord("Sydney", "Australia", "Australia/Sydney", 5300000, -33.8688, 151.2093),
    CityRecord("Toronto", "Canada", "America/Toronto", 6200000, 43.6532, -79.3832),
    CityRecord("Chicago", "United States", "America/Chicago", 2700000, 41.8781, -87.6298),
    CityRecord("Berlin", "Germany", "Europe/Berlin", 3600000, 52.5200, 13.4050),
    CityRecord("Dubai", "United Arab Emirates", "Asia/Dubai", 3500000, 25.2048, 55.2708),
    CityRecord("Johannesburg", "South Africa", "Africa/Johannesburg", 5600000, -26.2041, 28.0473),
    CityRecord("Kathmandu", "Nepal", "Asia/Kathmandu", 1400000, 27.7172, 85.3240),
    CityRecord("Sylhet", "Bangladesh", "Asia/Dhaka", 530000, 24.8949, 91.8687),
    CityRecord("Auckland", "New Zealand", "Pacific/Auckland", 1700000, -36.8485, 174.7633),
    CityRecord("Honolulu", "United States", "Pacific/Honolulu", 350000, 21.3069, -157.8583),
    CityRecord("Reykjavik", "Iceland", "Atlantic/Reykjavik", 130000, 64.1466, -21.9426),
    CityRecord("St. John's", "Canada", "America/St_Johns", 110000, 47.5615, -52.7126),
)


def iter_catalog() -> list[CityRecord]:
    return list(_CITY_CATALOG)


def count_cities() -> int:
    return len(_CITY_CATALOG)


def search_cities(query: str, limit: int = 10) -> list[CityRecord]:
    """Return catalog cities matching ``query``, most populous first.

    Matches are case-insensitive substrings of the city, country or zone id.
    """
    needle = query.strip().lower()
    if not needle:
        return []
    matches = [
        record
        for record in _CITY_CATALOG
        if needle in record.name.lower()
        or needle in record.country.lower()
        or needle in record.timezone.lower()
    ]
    matches.sort(key=lambda record: record.population, reverse=True)
    return matches[:limit] if limit > 0 else matches
