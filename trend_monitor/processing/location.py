"""
Finnish location detection.

Looks for the names of Finnish regions and their main cities in a text and
reports the best match. Shorter texts that mention a place get higher
confidence than long texts that mention it in passing.
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple

from trend_monitor.types import LocationData

FINNISH_REGIONS: Dict[str, List[str]] = {
    "Uusimaa": ["Helsinki", "Espoo", "Vantaa", "Kauniainen", "Kirkkonummi", "Kerava", "Järvenpää"],
    "Pirkanmaa": ["Tampere", "Nokia", "Ylöjärvi", "Kangasala", "Orivesi", "Valkeakoski"],
    "Varsinais-Suomi": ["Turku", "Kaarina", "Naantali", "Raisio", "Salo", "Loimaa"],
    "Pohjois-Pohjanmaa": ["Oulu", "Kempele", "Ii", "Muhos", "Tyrnävä", "Liminka"],
    "Keski-Suomi": ["Jyväskylä", "Äänekoski", "Jämsä", "Saarijärvi", "Keuruu"],
    "Pohjois-Savo": ["Kuopio", "Siilinjärvi", "Iisalmi", "Varkaus", "Suonenjoki"],
    "Satakunta": ["Pori", "Rauma", "Ulvila", "Kankaanpää", "Harjavalta"],
    "Päijät-Häme": ["Lahti", "Hollola", "Heinola", "Nastola", "Sysmä"],
    "Kymenlaakso": ["Kotka", "Kouvola", "Hamina", "Pyhtää"],
    "Lappi": ["Rovaniemi", "Tornio", "Kemi", "Kemijärvi", "Sodankylä"],
}

CITY_WEIGHT = 10.0
REGION_WEIGHT = 8.0

# Names shorter than this only match as whole words ("Ii" must not match "iiris")
MIN_PREFIX_MATCH_LENGTH = 3


def _name_pattern(name: str) -> Pattern:
    # Word-start anchored so inflected forms like "Tampereella" still match
    pattern = r"(?<!\w)" + re.escape(name.lower())
    if len(name) < MIN_PREFIX_MATCH_LENGTH:
        pattern += r"(?!\w)"
    return re.compile(pattern)


_CANDIDATES: List[Tuple[str, Optional[str], Pattern, float]] = []
for _region, _cities in FINNISH_REGIONS.items():
    for _city in _cities:
        _CANDIDATES.append((_region, _city, _name_pattern(_city), CITY_WEIGHT))
    _CANDIDATES.append((_region, None, _name_pattern(_region), REGION_WEIGHT))


def detect_location(text: str) -> LocationData:
    """
    Find the best Finnish location match in a text.

    Args:
        text: Text to analyze

    Returns:
        Matched region and city (city is None for region-name matches) with
        confidence in [0, 1]; confidence 0 and no region when nothing matches
    """
    if not text or not text.strip():
        return LocationData()

    lowered = text.lower()
    text_length = len(text)
    best = LocationData()

    for region, city, pattern, weight in _CANDIDATES:
        if not pattern.search(lowered):
            continue
        name = city or region
        confidence = min(1.0, len(name) / text_length * weight)
        if confidence > best.confidence:
            best = LocationData(region=region, city=city, confidence=confidence)

    return best
