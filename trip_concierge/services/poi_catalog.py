"""
Curated POI catalog for St. Petersburg and Leningrad Oblast.

The dataset is intentionally compact; it is the only source of places the
model is allowed to reference.
"""
import logging
from typing import Dict, List, Optional, Sequence, Union

from trip_concierge.models.place_models import Poi, PoiTag, Region, TagOption
from trip_concierge.models.request_models import BaseRegion

logger = logging.getLogger(__name__)

_POI_DATA = [
    {"id": "hermitage", "name": "Hermitage (Winter Palace)", "region": "spb", "lat": 59.939832, "lon": 30.31456,
     "tags": ["classic", "art", "history", "rain_ok"],
     "short": "The city's main museum: art and history right in the centre."},
    {"id": "palace-square", "name": "Palace Square", "region": "spb", "lat": 59.939095, "lon": 30.315868,
     "tags": ["classic", "walk", "architecture", "views", "budget"],
     "short": "Heart of the historic centre with the key sights nearby."},
    {"id": "isaac", "name": "St. Isaac's Cathedral", "region": "spb", "lat": 59.934158, "lon": 30.306096,
     "tags": ["classic", "architecture", "views", "history", "rain_ok"],
     "short": "Monumental cathedral with great views from the colonnade."},
    {"id": "church-savior", "name": "Church of the Savior on Spilled Blood", "region": "spb", "lat": 59.940075, "lon": 30.328657,
     "tags": ["classic", "architecture", "history", "rain_ok"],
     "short": "One of the most recognisable churches, mosaics inside."},
    {"id": "russian-museum", "name": "Russian Museum (Mikhailovsky Palace)", "region": "spb", "lat": 59.9389, "lon": 30.3326,
     "tags": ["art", "classic", "rain_ok"],
     "short": "A large collection of Russian art in a beautiful palace."},
    {"id": "summer-garden", "name": "Summer Garden", "region": "spb", "lat": 59.9499, "lon": 30.3315,
     "tags": ["walk", "classic", "views", "budget"],
     "short": "A walk among sculptures and alleys, ideal for a break."},
    {"id": "nevsky", "name": "Nevsky Prospekt (walk)", "region": "spb", "lat": 59.9323, "lon": 30.344,
     "tags": ["walk", "classic", "food", "coffee", "budget"],
     "short": "The main street: architecture, shop windows, cafes, atmosphere."},
    {"id": "new-holland", "name": "New Holland Island", "region": "spb", "lat": 59.9319, "lon": 30.2916,
     "tags": ["walk", "food", "coffee", "kids", "budget"],
     "short": "Island park with cafes, playgrounds and a modern city vibe."},
    {"id": "sevkabel", "name": "Sevkabel Port", "region": "spb", "lat": 59.9259, "lon": 30.2395,
     "tags": ["views", "food", "coffee", "walk", "night", "budget"],
     "short": "Gulf of Finland embankment, sunsets, food courts, events."},
    {"id": "petropavlovka", "name": "Peter and Paul Fortress", "region": "spb", "lat": 59.9506, "lon": 30.3162,
     "tags": ["classic", "history", "walk", "views", "budget"],
     "short": "Where the city began: walks along the walls, views of the Neva."},
    {"id": "vsm", "name": "Kunstkamera", "region": "spb", "lat": 59.9413, "lon": 30.3076,
     "tags": ["history", "rain_ok"],
     "short": "Old museum with unusual exhibits and history of science."},
    {"id": "strelka", "name": "Spit of Vasilyevsky Island", "region": "spb", "lat": 59.9434, "lon": 30.3062,
     "tags": ["views", "walk", "classic", "budget"],
     "short": "Postcard views of the Neva and the centre, best at sunset."},
    {"id": "kazansky", "name": "Kazan Cathedral", "region": "spb", "lat": 59.9342, "lon": 30.3246,
     "tags": ["architecture", "classic", "history", "rain_ok", "budget"],
     "short": "Imperial architecture and a grand colonnade on Nevsky."},
    {"id": "faberge", "name": "Faberge Museum", "region": "spb", "lat": 59.9295, "lon": 30.3467,
     "tags": ["art", "rain_ok"],
     "short": "Elegant museum of imperial eggs and jewellery art."},
    {"id": "loft-etagi", "name": "Loft Project ETAGI", "region": "spb", "lat": 59.9166, "lon": 30.3492,
     "tags": ["views", "coffee", "rain_ok", "budget"],
     "short": "Contemporary space with a rooftop viewpoint (when open)."},
    {"id": "planetarium", "name": "Planetarium No. 1", "region": "spb", "lat": 59.9215, "lon": 30.3082,
     "tags": ["rain_ok", "kids"],
     "short": "Immersive shows, a good option for an evening or a rainy day."},
    {"id": "zoo", "name": "Leningrad Zoo", "region": "spb", "lat": 59.9526, "lon": 30.3084,
     "tags": ["kids", "walk"],
     "short": "Classic family outing next to the Petrograd Side."},
    {"id": "peterhof", "name": "Peterhof (fountains and parks)", "region": "spb", "lat": 59.8845, "lon": 29.9169,
     "tags": ["classic", "daytrip", "nature", "walk", "views"],
     "short": "Palaces and parks on the gulf; best for half a day or a full day."},
    {"id": "tsarskoye", "name": "Tsarskoye Selo (Pushkin)", "region": "spb", "lat": 59.716, "lon": 30.396,
     "tags": ["classic", "daytrip", "history", "architecture"],
     "short": "Palace and park ensemble, good for a day trip."},
    {"id": "kronstadt", "name": "Kronstadt", "region": "spb", "lat": 59.9936, "lon": 29.7667,
     "tags": ["daytrip", "history", "views", "walk", "budget"],
     "short": "Naval history, the dam, views and a calm pace."},
    {"id": "vyborg", "name": "Vyborg (old town)", "region": "lenobl", "lat": 60.7133, "lon": 28.7328,
     "tags": ["daytrip", "history", "walk", "views"],
     "short": "Scandinavian atmosphere, narrow streets and medieval motifs."},
    {"id": "vyborg-castle", "name": "Vyborg Castle", "region": "lenobl", "lat": 60.7164, "lon": 28.7292,
     "tags": ["daytrip", "history", "views", "rain_ok"],
     "short": "Symbol of Vyborg; museum and views (check opening hours)."},
    {"id": "monrepo", "name": "Monrepos Park (Vyborg)", "region": "lenobl", "lat": 60.7366, "lon": 28.7156,
     "tags": ["daytrip", "nature", "walk", "views"],
     "short": "Rocks, trails and the bay: the best nature spot in Vyborg."},
    {"id": "oreshek", "name": "Oreshek Fortress (Shlisselburg)", "region": "lenobl", "lat": 59.9567, "lon": 31.0333,
     "tags": ["daytrip", "history", "views"],
     "short": "Island fortress at the source of the Neva with a rich history."},
    {"id": "gatchina", "name": "Gatchina (palace and park)", "region": "lenobl", "lat": 59.5673, "lon": 30.1315,
     "tags": ["daytrip", "classic", "walk", "nature", "history", "rain_ok"],
     "short": "Large park plus palace, an easy day trip."},
    {"id": "priyutino", "name": "Priyutino Estate", "region": "lenobl", "lat": 60.0197, "lon": 30.6757,
     "tags": ["daytrip", "history", "rain_ok", "budget"],
     "short": "Small estate museum not far from the city, calm format."},
    {"id": "lindulovskaya", "name": "Lindulovskaya Grove (Roshchino)", "region": "lenobl", "lat": 60.243, "lon": 29.602,
     "tags": ["daytrip", "nature", "walk", "budget"],
     "short": "A nature trail and fresh air, a perfect anti-city day."},
    {"id": "repino", "name": "Repino (coast walk)", "region": "lenobl", "lat": 60.172, "lon": 29.87,
     "tags": ["daytrip", "nature", "walk", "views", "budget"],
     "short": "Gulf, pines and an easy walk that works in almost any weather."},
    {"id": "sestroretsk", "name": "Sestroretsk (park, beach, gulf)", "region": "spb", "lat": 60.092, "lon": 29.956,
     "tags": ["nature", "walk", "views", "budget"],
     "short": "Nature by the water within the city limits."},
]

TAG_LABELS = [
    ("classic", "Classics"),
    ("history", "History"),
    ("art", "Art"),
    ("architecture", "Architecture"),
    ("walk", "Walks"),
    ("views", "Views"),
    ("food", "Food"),
    ("coffee", "Coffee"),
    ("kids", "With kids"),
    ("nature", "Nature"),
    ("daytrip", "Day trips"),
    ("budget", "Budget"),
    ("rain_ok", "Rainy day"),
]


class PoiCatalog:
    """Read-only lookup over the curated POIs"""

    def __init__(self, pois: Sequence[Poi]):
        by_id: Dict[str, Poi] = {}
        for poi in pois:
            if poi.id in by_id:
                raise ValueError(f"Duplicate POI id in catalog: {poi.id}")
            by_id[poi.id] = poi
        self._pois = tuple(pois)
        self._by_id = by_id

    @property
    def pois(self) -> List[Poi]:
        return list(self._pois)

    @property
    def by_id(self) -> Dict[str, Poi]:
        return dict(self._by_id)

    def get(self, poi_id: str) -> Optional[Poi]:
        return self._by_id.get(poi_id)

    def __contains__(self, poi_id: object) -> bool:
        return poi_id in self._by_id

    def __len__(self) -> int:
        return len(self._pois)

    def for_region(self, region: Union[BaseRegion, Region, str]) -> List[Poi]:
        """Candidate POIs for a request region; "both" passes the whole catalog through"""
        value = getattr(region, "value", region)
        if value == BaseRegion.BOTH.value:
            return list(self._pois)
        return [p for p in self._pois if p.region == value]

    @staticmethod
    def tag_options() -> List[TagOption]:
        return [TagOption(tag=PoiTag(tag), label=label) for tag, label in TAG_LABELS]


_default_catalog: Optional[PoiCatalog] = None

def get_catalog() -> PoiCatalog:
    """Process-wide catalog, built on first use"""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = PoiCatalog([Poi(**p) for p in _POI_DATA])
        logger.info("POI catalog loaded", extra={"poi_count": len(_default_catalog)})
    return _default_catalog
