import pytest

from geoaccess.config.settings import get_logging_config, get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_packaged_defaults(fresh_settings, monkeypatch):
    for name in ["GEOACCESS_CONFIG_PATH", "GEOACCESS_DISTANCE_UNIT", "GEOACCESS_DISTANCE_FORMULA", "GEOACCESS_GEOCODE_TABLE"]:
        monkeypatch.delenv(name, raising=False)

    settings = fresh_settings()

    assert settings.distance.formula == "haversine"
    assert settings.distance.unit == "miles"
    assert settings.distance.resolved_radius() == 3959.0
    assert settings.ingestion.columns.zip_code == "zip"


def test_env_overrides(fresh_settings, monkeypatch):
    monkeypatch.delenv("GEOACCESS_CONFIG_PATH", raising=False)
    monkeypatch.setenv("GEOACCESS_DISTANCE_UNIT", "Kilometers")
    monkeypatch.setenv("GEOACCESS_DISTANCE_FORMULA", "spherical_law_of_cosines")
    monkeypatch.setenv("GEOACCESS_LOG_LEVEL", "debug")

    settings = fresh_settings()

    assert settings.distance.unit == "kilometers"
    assert settings.distance.formula == "spherical_law_of_cosines"
    assert settings.app.log_level == "debug"


def test_external_config_file(fresh_settings, monkeypatch, tmp_path):
    path = tmp_path / "geoaccess.yaml"
    path.write_text("distance:\n  radius: 1.0\ningestion:\n  columns:\n    zip_code: ZIP\n", encoding="utf-8")
    monkeypatch.setenv("GEOACCESS_CONFIG_PATH", str(path))
    monkeypatch.delenv("GEOACCESS_DISTANCE_UNIT", raising=False)

    settings = fresh_settings()

    assert settings.distance.resolved_radius() == 1.0
    assert settings.ingestion.columns.zip_code == "ZIP"
    assert settings.ingestion.columns.lat == "lat"


def test_logging_config_is_a_dictconfig_mapping():
    config = get_logging_config()
    assert config["version"] == 1
    assert "console" in config["handlers"]


def test_unit_and_radius_labels_mismatched_radius_as_custom():
    from geoaccess.config.settings import DistanceSettings

    assert DistanceSettings().unit_and_radius() == ("miles", 3959.0)
    assert DistanceSettings(radius=6371).unit_and_radius() == ("custom", 6371.0)
    assert DistanceSettings(unit="kilometers", radius=6371).unit_and_radius() == ("kilometers", 6371.0)
    assert DistanceSettings(radius=6371).unit_and_radius("meters") == ("meters", 6_371_000.0)
