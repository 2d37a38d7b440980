import json

import pytest

from JuliaVisualizer.config import Settings, load_settings, MAX_ITERS, ESCAPE_RADIUS


def test_defaults():
    s = Settings()
    assert s.max_iter == MAX_ITERS
    assert s.escape_radius == ESCAPE_RADIUS
    assert s.colorizer == "gradient"
    assert s.colormap == "magma"


def test_shipped_settings_match_defaults():
    assert Settings.load() == Settings()


def test_from_dict_ignores_unknown_keys():
    s = Settings.from_dict({"max_iter": 64, "colorizer": "grayscale", "theme": "dark"})
    assert s.max_iter == 64
    assert s.colorizer == "grayscale"


def test_from_empty_dict():
    assert Settings.from_dict(None) == Settings()
    assert Settings.from_dict({}) == Settings()


@pytest.mark.parametrize("kwargs", [
    {"max_iter": 0},
    {"escape_radius": 0.0},
    {"post_escape": -1},
    {"colorizer": "sepia"},
    {"backend": "opencl"},
    {"gradient_size": 1, "white_range": 0},
    {"workers": 0},
    {"chunk_rows": 0},
    {"width": 0},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)


def test_load_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"max_iter": 100, "backend": "numba"}))
    s = Settings.load(str(path))
    assert s.max_iter == 100
    assert s.backend == "numba"


def test_missing_file_falls_back_to_defaults(tmp_path, capsys):
    s = Settings.load(str(tmp_path / "missing.json"))
    assert s == Settings()
    assert "Warning" in capsys.readouterr().out


def test_malformed_file_falls_back_to_defaults(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert load_settings(str(path)) is None
    assert Settings.load(str(path)) == Settings()
    assert "Warning" in capsys.readouterr().out


def test_integral_floats_are_coerced_to_int():
    s = Settings.from_dict({"max_iter": 500.0, "width": 640.0, "workers": 2.0})
    assert s.max_iter == 500 and isinstance(s.max_iter, int)
    assert s.width == 640 and isinstance(s.width, int)
    assert s.workers == 2 and isinstance(s.workers, int)


def test_integer_escape_radius_becomes_float():
    s = Settings(escape_radius=4)
    assert s.escape_radius == 4.0 and isinstance(s.escape_radius, float)


@pytest.mark.parametrize("kwargs", [
    {"max_iter": 12.5},
    {"max_iter": "500"},
    {"max_iter": True},
    {"chunk_rows": float("nan")},
    {"workers": 1.5},
    {"escape_radius": "2"},
])
def test_non_integer_settings_are_rejected(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)
