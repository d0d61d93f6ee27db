import pytest

from trip_concierge.models.place_models import Poi
from trip_concierge.services.poi_catalog import PoiCatalog
from trip_concierge.services.itinerary_repair import DEFAULT_POI_ID
from trip_concierge.utils.formatters import redact, safe_request_for_log


def _poi(poi_id, region="spb"):
    return Poi(id=poi_id, name=poi_id.title(), region=region, lat=59.9, lon=30.3, tags=["walk"], short="x")


def test_catalog_ids_are_unique(catalog):
    assert len({p.id for p in catalog.pois}) == len(catalog)


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        PoiCatalog([_poi("a"), _poi("a", region="lenobl")])


def test_lookup(catalog):
    assert catalog.get("hermitage").region == "spb"
    assert catalog.get("nowhere") is None
    assert "vyborg" in catalog
    assert catalog.by_id["oreshek"].region == "lenobl"


def test_repair_default_poi_exists(catalog):
    assert DEFAULT_POI_ID in catalog


def test_catalog_is_read_only(catalog):
    pois = catalog.pois
    pois.clear()
    assert len(catalog) > 0


def test_tag_options_cover_known_tags(catalog):
    tags = [t.tag.value for t in catalog.tag_options()]
    assert "classic" in tags
    assert len(tags) == len(set(tags))


def test_redact_replaces_secrets():
    assert redact("key=abc123&x=1", ["abc123", None]) == "key=***&x=1"
    assert redact(None, ["abc"]) == ""


def test_notes_capped_for_logging():
    payload = {"days": 2, "notes": "n" * 600}
    logged = safe_request_for_log(payload, notes_limit=200)
    assert len(logged["notes"]) == 200
    assert len(payload["notes"]) == 600
    assert safe_request_for_log("raw") == "raw"
