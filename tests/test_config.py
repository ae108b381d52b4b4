"""
Tests for option loading.
"""

import pytest

from mpvmarkers.config import MarkerOptions, default_options_path, load_options, parse_options


class TestParseOptions:
    """Test key=value option parsing."""

    def test_defaults(self):
        options = MarkerOptions()
        assert options.marker_display_duration == 1.0
        assert options.osd_duration == 1.5
        assert options.marker_prefix == "Marker"

    def test_values(self):
        options = parse_options(
            "# comment\n"
            "marker_display_duration=2\n"
            "osd_duration = 3.5\n"
            "marker_prefix=Chapter\n"
        )
        assert options == MarkerOptions(2.0, 3.5, "Chapter")

    def test_bad_lines_are_ignored(self):
        options = parse_options(
            "osd_duration=soon\n"
            "unknown_option=1\n"
            "no equals sign\n"
            "marker_prefix=\n"
        )
        assert options == MarkerOptions()


class TestLoadOptions:
    """Test reading the options file."""

    def test_missing_file(self, tmp_path):
        assert load_options(tmp_path / "auto_markers.conf") == MarkerOptions()

    def test_file(self, tmp_path):
        path = tmp_path / "auto_markers.conf"
        path.write_text("marker_prefix=Point\n", encoding="utf-8")
        assert load_options(path).marker_prefix == "Point"

    def test_default_path_honors_mpv_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MPV_HOME", str(tmp_path))
        assert default_options_path() == tmp_path / "script-opts" / "auto_markers.conf"


class TestOverrides:
    """Test command-line overrides."""

    def test_none_values_are_ignored(self):
        options = MarkerOptions().with_overrides(marker_prefix=None, osd_duration=4.0)
        assert options == MarkerOptions(osd_duration=4.0)

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError):
            MarkerOptions().with_overrides(marker_prefix="  ")
