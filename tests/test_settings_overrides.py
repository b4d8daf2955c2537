from __future__ import annotations

import pytest

from geoaccess.config.settings import get_settings

# The override helper is pure (no I/O) and guards which knobs an API caller may touch.
from geoaccess.config.overrides import apply_settings_overrides


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()

    out = apply_settings_overrides(settings, None)

    # Identity is intentional: the function returns early without rebuilding the model.
    assert out is settings


def test_apply_settings_overrides_can_override_distance_knobs():
    # Do not mutate the baseline; it is shared via lru_cache.
    settings = get_settings()

    out = apply_settings_overrides(settings, {"distance": {"unit": "kilometers"}})

    assert out.distance.unit == "kilometers"
    assert out.distance.resolved_radius() == 6371.0
    assert settings.distance.unit == "miles"


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()

    # File paths are never overridable per request.
    overrides = {"ingestion": {"geocode_table_path": "/etc/passwd"}}

    with pytest.raises(ValueError, match=r"disallowed key: 'ingestion'"):
        apply_settings_overrides(settings, overrides)

    with pytest.raises(ValueError, match=r"accessibility\.csv_path"):
        apply_settings_overrides(settings, {"accessibility": {"csv_path": "x"}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()

    with pytest.raises(ValueError, match=r"settings_overrides key 'accessibility' must be a mapping"):
        apply_settings_overrides(settings, {"accessibility": 1})


def test_apply_settings_overrides_revalidates_values():
    settings = get_settings()

    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"distance": {"unit": "furlongs"}})
