"""Tests for scene configuration loading."""

import json

import pytest
import skia

from engine.component import Event, EventType
from heartree.config import DEFAULT_LEAF_COLORS, DEFAULT_MESSAGES, SceneConfig, load_config, parse_color
from heartree.scene import HeartTreeScene, Phase


class TestParseColor:
    """Test hex color parsing."""

    def test_rgb(self):
        """Six-digit hex should parse as an opaque color."""
        assert parse_color("#FFB6C1") == skia.Color(255, 182, 193, 255)

    def test_rgba(self):
        """Eight-digit hex should carry its alpha."""
        assert parse_color("#00000080") == skia.Color(0, 0, 0, 128)

    def test_without_hash(self):
        """The leading hash should be optional."""
        assert parse_color("ec4899") == skia.Color(236, 72, 153)

    @pytest.mark.parametrize("value", ["#FFF", "#GGGGGG", "", "#1234567"])
    def test_invalid(self, value):
        """Malformed colors should raise ValueError."""
        with pytest.raises(ValueError):
            parse_color(value)


class TestSceneConfig:
    """Test defaults and derived values."""

    def test_defaults(self):
        """Defaults should carry the full content set."""
        cfg = SceneConfig()
        assert cfg.messages == DEFAULT_MESSAGES
        assert cfg.leaf_colors == DEFAULT_LEAF_COLORS
        assert cfg.resolution == (1920, 1080)
        assert cfg.text_start == 12.0
        assert cfg.ground_y == 1060

    def test_defaults_are_not_shared(self):
        """Mutable defaults should be independent per instance."""
        a, b = SceneConfig(), SceneConfig()
        a.messages.append("extra")
        assert "extra" not in b.messages

    def test_palette_drops_bad_entries(self):
        """Invalid palette entries should be skipped, not fatal."""
        cfg = SceneConfig(leaf_colors=["#FF0000", "nope"])
        assert cfg.palette() == [skia.Color(255, 0, 0)]

    def test_from_dict_overrides(self):
        """Known keys should override defaults."""
        cfg = SceneConfig.from_dict({"tree_duration": 4.0, "resolution": [1280, 720], "messages": ["hi"]})
        assert cfg.tree_duration == 4.0
        assert cfg.resolution == (1280, 720)
        assert cfg.messages == ["hi"]

    def test_from_dict_ignores_unknown_keys(self):
        """Unknown keys should be ignored."""
        cfg = SceneConfig.from_dict({"sparkles": True})
        assert not hasattr(cfg, "sparkles")

    def test_from_dict_keeps_default_for_bad_color(self):
        """A malformed color should fall back to the default."""
        cfg = SceneConfig.from_dict({"trunk_color": "pink", "text_color": 42})
        assert cfg.trunk_color == "#FFB6C1"
        assert cfg.text_color == "#FFFFFF"

    @pytest.mark.parametrize("key, value", [
        ("leaf_count", "300"),
        ("leaf_count", 12.5),
        ("branch_depth", True),
        ("gravity", "fast"),
        ("resolution", [1280]),
        ("resolution", [0, 720]),
        ("messages", "hello"),
        ("leaf_colors", ["#FF0000", 3]),
        ("font_family", None),
        ("seed", "abc"),
    ])
    def test_from_dict_keeps_default_for_wrong_type(self, key, value):
        """A value of the wrong type should fall back to the field default."""
        cfg = SceneConfig.from_dict({key: value})
        assert getattr(cfg, key) == getattr(SceneConfig(), key)

    def test_from_dict_widens_integers_to_floats(self):
        """Whole numbers are valid for float fields."""
        cfg = SceneConfig.from_dict({"gravity": 500, "seed": None})
        assert cfg.gravity == 500.0
        assert isinstance(cfg.gravity, float)
        assert cfg.seed is None


class TestLoadConfig:
    """Test loading configuration files."""

    def test_missing_file_uses_defaults(self, tmp_path):
        """A missing file should not be an error."""
        cfg = load_config(str(tmp_path / "absent.json"))
        assert cfg == SceneConfig()

    def test_no_path_uses_defaults(self):
        """No path should mean defaults."""
        assert load_config(None) == SceneConfig()

    def test_loads_json(self, tmp_path):
        """A JSON object should be merged over defaults."""
        path = tmp_path / "scene.json"
        path.write_text(json.dumps({"swipe_duration": 1.5, "seed": 3}), encoding="utf-8")
        cfg = load_config(str(path))
        assert cfg.swipe_duration == 1.5
        assert cfg.seed == 3
        assert cfg.tree_duration == 10.0

    def test_malformed_json_uses_defaults(self, tmp_path):
        """Broken JSON should be logged and replaced by defaults."""
        path = tmp_path / "scene.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(str(path)) == SceneConfig()

    def test_non_object_uses_defaults(self, tmp_path):
        """A JSON list is not a config."""
        path = tmp_path / "scene.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_config(str(path)) == SceneConfig()

    def test_wrongly_typed_values_do_not_halt_the_scene(self, tmp_path):
        """A bad value in the file should not crash the tree once the heart lands."""
        path = tmp_path / "scene.json"
        path.write_text(json.dumps({"leaf_count": "300", "seed": 1}), encoding="utf-8")
        cfg = load_config(str(path))
        assert cfg.leaf_count == 750
        assert cfg.seed == 1

        scene = HeartTreeScene(cfg)
        scene.on_init(None)
        scene.on_event(Event(EventType.MOUSE_PRESS, x=800, y=300))
        for _ in range(200):
            scene.on_update(1 / 60)
        assert scene.phase == Phase.GROWING
        assert scene.leaves
