"""Print cost estimation from model volume.

Weight is estimated from a single material density, material cost from the
material's price per gram, and a flat base fee from the size tier the
volume falls into.
"""

import math
from dataclasses import dataclass

from meshstats.config import get_material


@dataclass(frozen=True)
class PrintCostEstimate:
    """Estimated cost of printing a model, in dollars."""
    material: str
    weight_grams: float
    material_cost: float
    base_fee: float
    size_tier: str
    total_per_unit: float
    total: float


def round_half_up(value: float, places: int = 2) -> float:
    """Round to `places` decimals on the scaled float, ties toward +inf.

    Computed as floor(x * 10**places + 0.5) / 10**places, so 5.75 cm^3 of
    PLA costs $0.35 where round() would give $0.34.
    """
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def size_tier(config: dict, volume_cm3: float) -> dict:
    """First size tier whose max_volume holds `volume_cm3`."""
    tiers = config["derived"]["size_tiers"]
    for tier in tiers:
        if volume_cm3 <= tier["max_volume"]:
            return tier
    return tiers[-1]


def estimate_print_cost(volume_cm3: float, material: str, config: dict,
                        quantity: int = 1) -> PrintCostEstimate:
    """Estimate the print cost of a model.

    Args:
        volume_cm3: Solid volume of one unit in cm^3
        material: Material key, e.g. 'PLA'
        config: Full configuration dict
        quantity: Number of units

    Returns:
        PrintCostEstimate with amounts rounded to cents
    """
    if volume_cm3 < 0:
        raise ValueError(f"volume must be non-negative, got {volume_cm3}")
    if quantity < 1:
        raise ValueError(f"quantity must be at least 1, got {quantity}")

    mat = get_material(config, material)
    weight = volume_cm3 * config["print"]["material_density"]
    material_cost = weight * mat["price_per_gram"]

    tier = size_tier(config, volume_cm3)
    total_per_unit = material_cost + tier["base_fee"]

    return PrintCostEstimate(
        material=material,
        weight_grams=round_half_up(weight, 1),
        material_cost=round_half_up(material_cost),
        base_fee=tier["base_fee"],
        size_tier=tier["name"],
        total_per_unit=round_half_up(total_per_unit),
        total=round_half_up(total_per_unit * quantity),
    )


def format_price(price: float) -> str:
    return f"${price:.2f}"
