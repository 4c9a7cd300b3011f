# besttiming/catalog/cities.py
"""
Built-in destination catalog.

Reference data only: the scoring core reads destinations by id and never
mutates them. `search` is the simple substring filter used by the city
selector; anything smarter belongs to the catalog service, not here.
"""
from __future__ import annotations

from typing import Optional

from ..models import Destination


def _d(
    id: str,
    name_local: str,
    name_en: str,
    country: str,
    country_code: str,
    currency: str,
    latitude: float,
    longitude: float,
    keywords: list[str],
) -> Destination:
    return Destination(
        id=id,
        name_local=name_local,
        name_en=name_en,
        country=country,
        country_code=country_code,
        currency=currency,
        latitude=latitude,
        longitude=longitude,
        keywords=keywords,
    )


DESTINATIONS: tuple[Destination, ...] = (
    # East Asia
    _d("osaka", "오사카", "Osaka", "Japan", "JP", "JPY", 34.6937, 135.5023, ["kansai", "food", "usj"]),
    _d("tokyo", "도쿄", "Tokyo", "Japan", "JP", "JPY", 35.6762, 139.6503, ["shopping", "city", "shinjuku"]),
    _d("fukuoka", "후쿠오카", "Fukuoka", "Japan", "JP", "JPY", 33.5904, 130.4017, ["kyushu", "ramen", "onsen"]),
    _d("sapporo", "삿포로", "Sapporo", "Japan", "JP", "JPY", 43.0618, 141.3545, ["hokkaido", "snow", "ski"]),
    _d("okinawa", "오키나와", "Okinawa", "Japan", "JP", "JPY", 26.2124, 127.6809, ["beach", "island", "naha"]),
    _d("taipei", "타이베이", "Taipei", "Taiwan", "TW", "TWD", 25.0330, 121.5654, ["night market", "food"]),
    _d("hongkong", "홍콩", "Hong Kong", "Hong Kong", "HK", "HKD", 22.3193, 114.1694, ["city", "shopping", "night view"]),
    # Southeast Asia
    _d("danang", "다낭", "Da Nang", "Vietnam", "VN", "VND", 16.0544, 108.2022, ["beach", "resort", "hoi an"]),
    _d("bangkok", "방콕", "Bangkok", "Thailand", "TH", "THB", 13.7563, 100.5018, ["temple", "food", "massage"]),
    _d("cebu", "세부", "Cebu", "Philippines", "PH", "PHP", 10.3157, 123.8854, ["diving", "beach", "island"]),
    _d("bali", "발리", "Bali", "Indonesia", "ID", "IDR", -8.3405, 115.0920, ["surf", "resort", "ubud"]),
    _d("kota-kinabalu", "코타키나발루", "Kota Kinabalu", "Malaysia", "MY", "MYR", 5.9804, 116.0735, ["sunset", "island", "borneo"]),
    _d("singapore", "싱가포르", "Singapore", "Singapore", "SG", "SGD", 1.3521, 103.8198, ["city", "marina bay", "food"]),
    # Pacific / Americas
    _d("guam", "괌", "Guam", "United States", "US", "USD", 13.4443, 144.7937, ["beach", "resort", "shopping"]),
    _d("hawaii", "하와이", "Hawaii", "United States", "US", "USD", 21.3069, -157.8583, ["honolulu", "surf", "beach"]),
    _d("los-angeles", "로스앤젤레스", "Los Angeles", "United States", "US", "USD", 34.0522, -118.2437, ["hollywood", "city", "beach"]),
    # Europe
    _d("paris", "파리", "Paris", "France", "FR", "EUR", 48.8566, 2.3522, ["museum", "art", "romantic"]),
    _d("london", "런던", "London", "United Kingdom", "GB", "GBP", 51.5074, -0.1278, ["museum", "musical", "city"]),
    _d("barcelona", "바르셀로나", "Barcelona", "Spain", "ES", "EUR", 41.3874, 2.1686, ["gaudi", "beach", "tapas"]),
    # Oceania
    _d("sydney", "시드니", "Sydney", "Australia", "AU", "AUD", -33.8688, 151.2093, ["opera house", "beach", "harbour"]),
)

_BY_ID: dict[str, Destination] = {d.id: d for d in DESTINATIONS}


def all_destinations() -> list[Destination]:
    return list(DESTINATIONS)


def get_destination(destination_id: Optional[str]) -> Optional[Destination]:
    """Lookup by id. Unknown or malformed ids return None."""
    if not destination_id or not str(destination_id).strip():
        return None
    return _BY_ID.get(str(destination_id).strip().lower())


def search(query: Optional[str] = None) -> list[Destination]:
    """
    Case-insensitive substring search over id, names, country and keywords.
    Empty query returns the whole catalog in catalog order.
    """
    q = (query or "").casefold().strip()
    if not q:
        return list(DESTINATIONS)

    out: list[Destination] = []
    for d in DESTINATIONS:
        haystack = [d.id, d.name_local, d.name_en, d.country, *d.keywords]
        if any(q in h.casefold() for h in haystack):
            out.append(d)
    return out
