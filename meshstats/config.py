"""Configuration loading, validation, and derived value computation."""

import os
import math
from typing import Any

import yaml


# Default config path
DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "config", "default.yaml"
)

STRUCTURAL_POLICIES = ("skip", "fail")
EMPTY_POLICIES = ("zero", "raise")

# Millimetres per scene length unit
UNIT_TO_MM = {
    "mm": 1.0,
    "cm": 10.0,
    "m": 1000.0,
    "in": 25.4,
}


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


def load_config(path: str = None) -> dict:
    """Load configuration from YAML file, validate, and compute derived values."""
    if path is None:
        path = DEFAULT_CONFIG_PATH

    with open(path, "r") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file {path} does not contain a mapping")

    validate_config(config)
    compute_derived(config)
    return config


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: dict) -> None:
    """Validate configuration constraints. Raises ConfigError on failure."""
    errors = []

    # --- Analysis policies ---
    analysis = config.get("analysis", {})
    policy = analysis.get("structural_policy")
    if policy not in STRUCTURAL_POLICIES:
        errors.append(
            f"analysis.structural_policy must be one of {STRUCTURAL_POLICIES}, got {policy!r}"
        )
    empty = analysis.get("empty_policy")
    if empty not in EMPTY_POLICIES:
        errors.append(
            f"analysis.empty_policy must be one of {EMPTY_POLICIES}, got {empty!r}"
        )
    if not isinstance(analysis.get("include_soup_geometry"), bool):
        errors.append("analysis.include_soup_geometry must be true or false")
    eps = analysis.get("degenerate_area_epsilon")
    if not _is_number(eps) or eps < 0 or not math.isfinite(eps):
        errors.append(f"analysis.degenerate_area_epsilon must be a non-negative number, got {eps!r}")

    # --- Units ---
    unit = config.get("units", {}).get("scene_unit")
    if unit not in UNIT_TO_MM:
        errors.append(f"units.scene_unit must be one of {sorted(UNIT_TO_MM)}, got {unit!r}")

    # --- Print materials ---
    print_cfg = config.get("print", {})
    density = print_cfg.get("material_density", 0)
    if not _is_number(density) or density <= 0:
        errors.append(f"print.material_density must be positive, got {density!r}")

    materials = print_cfg.get("materials", {})
    if not materials:
        errors.append("print.materials must define at least one material")
    for key, mat in materials.items():
        price = mat.get("price_per_gram", 0)
        if not _is_number(price) or price < 0:
            errors.append(f"Material '{key}' price_per_gram must be non-negative")
    default_material = print_cfg.get("default_material")
    if materials and default_material not in materials:
        errors.append(f"print.default_material '{default_material}' is not a defined material")

    # --- Size tiers: increasing volumes, only the last may be unbounded ---
    tiers = print_cfg.get("size_tiers", [])
    if not tiers:
        errors.append("print.size_tiers must define at least one tier")
    previous = 0.0
    for i, tier in enumerate(tiers):
        max_volume = tier.get("max_volume")
        if max_volume is None:
            if i != len(tiers) - 1:
                errors.append(f"Size tier '{tier.get('name')}' is unbounded but not last")
        elif not _is_number(max_volume) or max_volume <= previous:
            errors.append(
                f"Size tier '{tier.get('name')}' max_volume must exceed {previous}, got {max_volume!r}"
            )
        else:
            previous = max_volume
        fee = tier.get("base_fee", -1)
        if not _is_number(fee) or fee < 0:
            errors.append(f"Size tier '{tier.get('name')}' base_fee must be non-negative")

    # --- Beds ---
    beds = print_cfg.get("beds", {})
    for key, bed in beds.items():
        for axis in ("x", "y", "z"):
            size = bed.get(axis, 0)
            if not _is_number(size) or size <= 0:
                errors.append(f"Bed '{key}' {axis} must be positive, got {size!r}")
    default_bed = print_cfg.get("default_bed")
    if default_bed not in beds:
        errors.append(f"print.default_bed '{default_bed}' is not a defined bed")

    if errors:
        raise ConfigError("Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))


def compute_derived(config: dict) -> None:
    """Compute derived values and add them to the config dict."""
    derived = {}

    mm_per_unit = UNIT_TO_MM[config["units"]["scene_unit"]]
    derived["mm_per_unit"] = mm_per_unit
    # 1 cm^3 = 1000 mm^3
    derived["cm3_per_unit3"] = mm_per_unit ** 3 / 1000.0

    derived["size_tiers"] = [
        {
            "name": tier["name"],
            "max_volume": math.inf if tier.get("max_volume") is None else float(tier["max_volume"]),
            "base_fee": float(tier["base_fee"]),
        }
        for tier in config["print"]["size_tiers"]
    ]

    config["derived"] = derived


def get_material(config: dict, material: str) -> dict:
    """Get print material properties by key (e.g. 'PLA').

    Raises:
        ValueError: if the material is not configured
    """
    materials = config["print"]["materials"]
    if material not in materials:
        raise ValueError(
            f"Unknown material '{material}'; expected one of {sorted(materials)}"
        )
    return materials[material]


def get_bed(config: dict, bed: str = None) -> dict:
    """Get a print bed preset (build volume in mm), defaulting to print.default_bed."""
    if bed is None:
        bed = config["print"]["default_bed"]
    beds = config["print"]["beds"]
    if bed not in beds:
        raise ValueError(f"Unknown print bed '{bed}'; expected one of {sorted(beds)}")
    return beds[bed]
