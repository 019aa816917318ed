"""Tests for configuration loading and validation."""

import math

import pytest
import yaml
from copy import deepcopy
from meshstats.config import (load_config, validate_config, compute_derived, get_bed,
                              get_material, ConfigError)


class TestConfigLoading:
    """Test that valid configs load correctly."""

    def test_default_config_loads(self, default_config):
        """Valid default config loads without error."""
        assert default_config is not None
        assert "analysis" in default_config
        assert "print" in default_config
        assert "derived" in default_config

    def test_default_policies(self, default_config):
        """Defaults skip malformed submeshes and exclude soups."""
        analysis = default_config["analysis"]
        assert analysis["structural_policy"] == "skip"
        assert analysis["empty_policy"] == "zero"
        assert analysis["include_soup_geometry"] is False

    def test_derived_units(self, default_config):
        """Centimetre scenes: 10 mm per unit, 1 cm^3 per unit^3."""
        derived = default_config["derived"]
        assert derived["mm_per_unit"] == 10.0
        assert derived["cm3_per_unit3"] == 1.0

    def test_last_tier_unbounded(self, default_config):
        """The final size tier has no upper volume limit."""
        assert default_config["derived"]["size_tiers"][-1]["max_volume"] == math.inf

    def test_custom_file(self, tmp_path, default_config):
        """A user YAML file is loaded and validated."""
        cfg = deepcopy(default_config)
        del cfg["derived"]
        cfg["units"]["scene_unit"] = "mm"
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump(cfg))
        loaded = load_config(str(path))
        assert loaded["derived"]["mm_per_unit"] == 1.0
        assert loaded["derived"]["cm3_per_unit3"] == pytest.approx(0.001)

    def test_non_mapping_file(self, tmp_path):
        """A YAML file that is not a mapping is rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="does not contain a mapping"):
            load_config(str(path))


class TestInvalidConfigs:
    """Test that invalid configurations raise clear errors."""

    def _bad(self, default_config):
        bad = deepcopy(default_config)
        del bad["derived"]
        return bad

    def test_unknown_structural_policy(self, default_config):
        bad = self._bad(default_config)
        bad["analysis"]["structural_policy"] = "ignore"
        with pytest.raises(ConfigError, match="structural_policy"):
            validate_config(bad)

    def test_unknown_empty_policy(self, default_config):
        bad = self._bad(default_config)
        bad["analysis"]["empty_policy"] = "panic"
        with pytest.raises(ConfigError, match="empty_policy"):
            validate_config(bad)

    def test_negative_epsilon(self, default_config):
        bad = self._bad(default_config)
        bad["analysis"]["degenerate_area_epsilon"] = -1
        with pytest.raises(ConfigError, match="degenerate_area_epsilon"):
            validate_config(bad)

    def test_unknown_unit(self, default_config):
        bad = self._bad(default_config)
        bad["units"]["scene_unit"] = "furlong"
        with pytest.raises(ConfigError, match="scene_unit"):
            validate_config(bad)

    def test_zero_density(self, default_config):
        bad = self._bad(default_config)
        bad["print"]["material_density"] = 0
        with pytest.raises(ConfigError, match="material_density must be positive"):
            validate_config(bad)

    def test_unbounded_tier_not_last(self, default_config):
        bad = self._bad(default_config)
        bad["print"]["size_tiers"][0]["max_volume"] = None
        with pytest.raises(ConfigError, match="unbounded but not last"):
            validate_config(bad)

    def test_tiers_must_increase(self, default_config):
        bad = self._bad(default_config)
        bad["print"]["size_tiers"][1]["max_volume"] = 10
        with pytest.raises(ConfigError, match="max_volume must exceed"):
            validate_config(bad)

    def test_bad_bed_size(self, default_config):
        bad = self._bad(default_config)
        bad["print"]["beds"]["custom"]["z"] = 0
        with pytest.raises(ConfigError, match="Bed 'custom' z must be positive"):
            validate_config(bad)

    def test_unknown_default_material(self, default_config):
        bad = self._bad(default_config)
        bad["print"]["default_material"] = "WOOD"
        with pytest.raises(ConfigError, match="default_material"):
            validate_config(bad)

    def test_all_errors_reported(self, default_config):
        """Every problem is listed in one ConfigError."""
        bad = self._bad(default_config)
        bad["analysis"]["structural_policy"] = "ignore"
        bad["units"]["scene_unit"] = "furlong"
        with pytest.raises(ConfigError) as info:
            validate_config(bad)
        assert "structural_policy" in str(info.value)
        assert "scene_unit" in str(info.value)

    def test_compute_derived_replaces(self, default_config):
        """compute_derived rebuilds the derived section."""
        cfg = self._bad(default_config)
        compute_derived(cfg)
        assert cfg["derived"]["mm_per_unit"] == 10.0


class TestLookups:
    """Test material and bed lookups."""

    def test_get_material(self, default_config):
        assert get_material(default_config, "PLA")["price_per_gram"] == 0.05

    def test_unknown_material(self, default_config):
        with pytest.raises(ValueError, match="Unknown material"):
            get_material(default_config, "WOOD")

    def test_default_bed(self, default_config):
        assert get_bed(default_config)["name"] == "Bambu P1S"

    def test_unknown_bed(self, default_config):
        with pytest.raises(ValueError, match="Unknown print bed"):
            get_bed(default_config, "ender-3")
