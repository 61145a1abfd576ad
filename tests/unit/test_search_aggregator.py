import asyncio

import pytest

from hobbyhub.client.search import LocationSelectEvent, NearbySearchAggregator, merge_results
from hobbyhub.config.settings import SearchSettings
from hobbyhub.core.exceptions import ProviderError
from hobbyhub.schemas.geo import Coordinate
from hobbyhub.schemas.search import LocationResult, MapMarker, MarkerResult

DEBOUNCE = 0.02


def marker(id, title, description="", lat=40.71, lon=-74.0):
    return MapMarker(id=id, title=title, description=description, coordinate=Coordinate(latitude=lat, longitude=lon))


def place(id, name, lat=48.85, lon=2.35):
    return LocationResult(
        id=id,
        title=name,
        description="City",
        coordinate=Coordinate(latitude=lat, longitude=lon),
        formatted_address=name,
    )


class RecordingGeocoder:
    def __init__(self, results=None, error=None, gates=None):
        self.results = results or {}
        self.error = error
        self.gates = gates or {}
        self.calls = []

    async def forward_geocode(self, query, near=None):
        self.calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))


MARKERS = [
    marker("m1", "Photography Workshop", "Learn manual mode"),
    marker("m2", "Chess Club", "Weekly games, photo night"),
    marker("m3", "Pottery", "Wheel throwing"),
]


def make(geocoder, **kwargs):
    published = []
    aggregator = NearbySearchAggregator(
        geocoder,
        markers=MARKERS,
        on_results=published.append,
        debounce_seconds=DEBOUNCE,
        **kwargs,
    )
    return aggregator, published


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "p", "ph", "  ph  "])
async def test_short_query_clears_without_network(text):
    geocoder = RecordingGeocoder()
    aggregator, published = make(geocoder)
    aggregator.results = [MarkerResult.from_marker(MARKERS[0])]

    aggregator.set_query(text)

    assert aggregator.results == []
    assert aggregator.loading is False
    assert published == [[]]
    await asyncio.sleep(DEBOUNCE * 3)
    assert geocoder.calls == []


@pytest.mark.asyncio
async def test_rapid_typing_runs_one_search_with_latest_text():
    geocoder = RecordingGeocoder()
    aggregator, published = make(geocoder)

    for text in ("pho", "phot", "photo"):
        aggregator.set_query(text)
        await asyncio.sleep(DEBOUNCE / 4)
    assert aggregator.loading is True

    await aggregator.wait_until_idle()

    assert geocoder.calls == ["photo"]
    assert len(published) == 1
    assert [r.id for r in aggregator.results] == ["m1", "m2"]
    assert aggregator.loading is False


@pytest.mark.asyncio
async def test_markers_come_before_geocoded_places():
    geocoder = RecordingGeocoder(results={"paris": [place("location-1", "Paris, France")]})
    markers = [marker("m9", "Paris meetup")]
    aggregator = NearbySearchAggregator(geocoder, markers=markers, debounce_seconds=DEBOUNCE)

    aggregator.set_query("paris")
    await aggregator.wait_until_idle()

    assert [r.kind for r in aggregator.results] == ["marker", "location"]
    assert [r.id for r in aggregator.results] == ["m9", "location-1"]


@pytest.mark.asyncio
async def test_marker_match_is_case_insensitive_on_title_and_description():
    aggregator, _ = make(RecordingGeocoder())
    results = await aggregator.search_now("PHOTO")
    assert [r.id for r in results] == ["m1", "m2"]


@pytest.mark.asyncio
async def test_geocoding_failure_keeps_marker_matches():
    geocoder = RecordingGeocoder(error=ProviderError("Geocoding provider timed out after 8s"))
    aggregator, published = make(geocoder)

    aggregator.set_query("Photography")
    await aggregator.wait_until_idle()

    assert [r.id for r in aggregator.results] == ["m1"]
    assert published[-1][0].title == "Photography Workshop"


@pytest.mark.asyncio
async def test_unexpected_geocoder_error_is_contained():
    aggregator, _ = make(RecordingGeocoder(error=RuntimeError("socket closed")))
    results = await aggregator.search_now("pottery")
    assert [r.id for r in results] == ["m3"]


@pytest.mark.asyncio
async def test_slow_response_for_older_query_is_discarded():
    paris_gate = asyncio.Event()
    geocoder = RecordingGeocoder(
        results={
            "paris": [place("location-paris", "Paris, France")],
            "london": [place("location-london", "London, UK", 51.5, -0.12)],
        },
        gates={"paris": paris_gate},
    )
    aggregator, published = make(geocoder)

    aggregator.set_query("paris")
    await asyncio.sleep(DEBOUNCE * 3)
    assert geocoder.calls == ["paris"]  # in flight, waiting on the provider

    aggregator.set_query("london")
    await asyncio.sleep(DEBOUNCE * 3)
    assert [r.id for r in aggregator.results] == ["location-london"]

    paris_gate.set()
    await aggregator.wait_until_idle()

    assert geocoder.calls == ["paris", "london"]
    assert [r.id for r in aggregator.results] == ["location-london"]
    assert len(published) == 1


@pytest.mark.asyncio
async def test_close_cancels_pending_and_marks_in_flight_stale():
    gate = asyncio.Event()
    geocoder = RecordingGeocoder(results={"chess": [place("location-chess", "Chess Street")]}, gates={"chess": gate})
    aggregator, published = make(geocoder)

    aggregator.set_query("chess")
    await asyncio.sleep(DEBOUNCE * 3)
    aggregator.close()
    gate.set()
    await aggregator.wait_until_idle()
    assert published == []

    aggregator.set_query("pottery")
    aggregator.close()
    await asyncio.sleep(DEBOUNCE * 3)
    assert geocoder.calls == ["chess"]
    assert aggregator.loading is False


@pytest.mark.asyncio
async def test_set_markers_replaces_local_set():
    aggregator, _ = make(RecordingGeocoder())
    aggregator.set_markers([marker("m42", "Photo walk")])
    results = await aggregator.search_now("photo")
    assert [r.id for r in results] == ["m42"]


@pytest.mark.asyncio
async def test_search_now_respects_minimum_length():
    geocoder = RecordingGeocoder()
    aggregator, _ = make(geocoder)
    assert await aggregator.search_now("ph") == []
    assert geocoder.calls == []


def test_select_emits_event_without_touching_markers():
    selected = []
    aggregator = NearbySearchAggregator(RecordingGeocoder(), markers=MARKERS, on_location_select=selected.append)
    before = [m.model_dump() for m in MARKERS]

    location = place("location-7", "Louvre, Paris")
    event = aggregator.select(location)
    marker_event = aggregator.select(MarkerResult.from_marker(MARKERS[0]))

    assert event == LocationSelectEvent(coordinate=location.coordinate, description="Louvre, Paris")
    assert marker_event.description == "Photography Workshop"
    assert selected == [event, marker_event]
    assert [m.model_dump() for m in MARKERS] == before


def test_merge_results_drops_duplicate_ids():
    m = MarkerResult.from_marker(MARKERS[0])
    dup = place("m1", "Same id")
    merged = merge_results([m], [dup, place("location-2", "Other")])
    assert [r.id for r in merged] == ["m1", "location-2"]
    assert merged[0].kind == "marker"


def test_from_settings_uses_configured_tuning():
    settings = SearchSettings(debounce_ms=150, min_query_length=4)
    aggregator = NearbySearchAggregator.from_settings(RecordingGeocoder(), settings, markers=MARKERS)

    assert aggregator.debounce_seconds == pytest.approx(0.15)
    assert aggregator.min_query_length == 4
    assert aggregator._is_searchable("chess")
    assert not aggregator._is_searchable("pho")
