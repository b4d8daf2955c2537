import pytest

from geoaccess.analysis.report import one_line_summary, report_rows, write_report_csv
from geoaccess.analysis.run import run_accessibility
from geoaccess.config.settings import get_settings
from geoaccess.core.errors import EmptyInputError
from geoaccess.core.geo import GeoPoint, distance
from geoaccess.domain.models import Location
from geoaccess.ingestion.geocoding import StaticGeocoder


def _locations():
    return [
        Location(id="austin", name="Austin", lat=30.2672, lon=-97.7431, extra={"kind": "hq"}),
        Location(id="ghost", name="Ghost", address="1 Nowhere Ln"),
        Location(id="nashville", name="Nashville", address="1 Broadway", city="Nashville", state="TN"),
        Location(id="denver", name="Denver", lat=39.7392, lon=-104.9903),
    ]


def _geocoder():
    return StaticGeocoder({"1 Broadway, Nashville, TN": GeoPoint(lat=36.1627, lon=-86.7816)})


def test_run_accessibility_scores_in_input_order_and_drops_unresolved():
    settings = get_settings()
    report = run_accessibility(_locations(), settings=settings, geocoder=_geocoder(), unit="kilometers")

    assert [r.location.id for r in report.results] == ["austin", "nashville", "denver"]
    assert report.unit == "kilometers"
    assert report.radius == 6371.0
    assert report.formula == settings.distance.formula
    assert report.stats.dropped_ids == ["ghost"]
    assert report.stats.drop_rate == pytest.approx(0.25)

    austin = GeoPoint(lat=30.2672, lon=-97.7431)
    nashville = GeoPoint(lat=36.1627, lon=-86.7816)
    denver = GeoPoint(lat=39.7392, lon=-104.9903)
    expected = (distance(austin, nashville, "haversine", 6371) + distance(austin, denver, "haversine", 6371)) / 2
    assert report.results[0].average_distance == pytest.approx(expected)
    assert report.results[0].nearest.id == "nashville"
    assert report.meta["streamed"] is False


def test_default_unit_is_miles():
    report = run_accessibility(_locations(), settings=get_settings(), geocoder=_geocoder())
    assert report.unit == "miles"
    assert report.radius == 3959.0


def test_streaming_path_gives_same_scores_without_neighbors():
    settings = get_settings()
    full = run_accessibility(_locations(), settings=settings, geocoder=_geocoder())
    streamed = run_accessibility(
        _locations(),
        settings=settings,
        geocoder=_geocoder(),
        settings_overrides={"accessibility": {"streaming_threshold": 2}},
    )

    assert streamed.meta["streamed"] is True
    assert [r.average_distance for r in streamed.results] == pytest.approx(
        [r.average_distance for r in full.results]
    )
    assert all(r.nearest is None for r in streamed.results)


def test_settings_overrides_switch_formula_and_radius():
    report = run_accessibility(
        _locations(),
        settings=get_settings(),
        geocoder=_geocoder(),
        settings_overrides={"distance": {"formula": "spherical_law_of_cosines", "radius": 1.0}},
    )
    assert report.formula == "spherical_law_of_cosines"
    assert report.radius == 1.0
    assert report.unit == "custom"
    # Unit radius 1 -> averages are central angles in radians.
    assert all(0 < r.average_distance < 3.1416 for r in report.results)


def test_explicit_radius_is_not_labelled_with_the_configured_unit():
    # A kilometre radius under the default "miles" unit must not be reported as miles.
    report = run_accessibility(
        _locations(),
        settings=get_settings(),
        geocoder=_geocoder(),
        settings_overrides={"distance": {"radius": 6371}},
    )
    assert report.unit == "custom"
    assert report.radius == 6371.0
    assert {row["unit"] for row in report_rows(report)} == {"custom"}
    assert "unit=custom" in one_line_summary(report)

    # A radius matching the configured unit keeps the unit name.
    same = run_accessibility(
        _locations(),
        settings=get_settings(),
        geocoder=_geocoder(),
        settings_overrides={"distance": {"unit": "kilometers", "radius": 6371}},
    )
    assert same.unit == "kilometers"

    # An explicit unit argument wins over a configured radius.
    explicit = run_accessibility(
        _locations(),
        settings=get_settings(),
        geocoder=_geocoder(),
        unit="miles",
        settings_overrides={"distance": {"radius": 6371}},
    )
    assert explicit.unit == "miles"
    assert explicit.radius == 3959.0


def test_fewer_than_two_resolved_locations_raises():
    with pytest.raises(EmptyInputError, match="got 1 of 2"):
        run_accessibility(
            [Location(id="a", lat=1, lon=1), Location(id="b", address="unknown")],
            settings=get_settings(),
        )


def test_report_rows_and_csv(tmp_path):
    report = run_accessibility(_locations(), settings=get_settings(), geocoder=_geocoder())
    rows = report_rows(report)

    assert rows[0]["id"] == "austin"
    assert rows[0]["kind"] == "hq"
    assert rows[0]["unit"] == "miles"
    assert rows[1]["lat"] == pytest.approx(36.1627)

    out = write_report_csv(report, tmp_path / "out" / "scores.csv")
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("id,name,address,city,state,zip_code,kind,lat,lon,average_distance")
    assert len(lines) == 4

    summary = one_line_summary(report)
    assert "resolved=3/4" in summary
    assert "dropped=1 (25.0%)" in summary
