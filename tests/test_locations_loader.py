import pytest
from pydantic import ValidationError

from geoaccess.config.settings import CsvColumns
from geoaccess.ingestion.locations import load_locations_csv, parse_locations


def test_load_locations_csv_defaults(tmp_path):
    path = tmp_path / "locations.csv"
    path.write_text(
        "id,name,address,city,state,zip,lat,lon,type\n"
        "a,Clinic A,100 Congress Ave,Austin,TX,78701,30.2672,-97.7431,clinic\n"
        ",Clinic B,200 Lavaca St,Austin,TX,78701,,,pharmacy\n",
        encoding="utf-8",
    )

    locs = load_locations_csv(path)

    assert [loc.id for loc in locs] == ["a", "2"]
    assert locs[0].lat == pytest.approx(30.2672)
    assert locs[0].has_coordinates
    assert locs[1].lat is None and locs[1].lon is None
    assert not locs[1].has_coordinates
    assert locs[1].extra == {"type": "pharmacy"}


def test_custom_column_mapping():
    cols = CsvColumns(id="Store #", name="Name", address="Street", zip_code="ZIP", lat="Latitude", lon="Longitude")
    rows = [
        {"Store #": "17", "Name": "Downtown", "Street": "1 Main", "ZIP": "37201", "Latitude": "36.16", "Longitude": "-86.78"},
    ]

    locs = parse_locations(rows, columns=cols)

    assert locs[0].id == "17"
    assert locs[0].zip_code == "37201"
    assert locs[0].lon == pytest.approx(-86.78)
    assert locs[0].extra == {}


def test_out_of_range_coordinates_fail_validation():
    with pytest.raises(ValidationError):
        parse_locations([{"id": "x", "lat": "91", "lon": "0"}])


def test_half_coordinates_fail_validation():
    with pytest.raises(ValidationError, match="lat and lon must be given together"):
        parse_locations([{"id": "x", "lat": "30", "lon": ""}])
