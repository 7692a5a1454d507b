"""Rental price estimate used by the price-suggestion form.

This is a rule-of-thumb formula, not a model: a per-Marla city rate scaled by
property type, plus flat amounts for rooms and a lawn, a furnishing premium
and a small random jitter. Results are rounded to the nearest 1000.
"""
import random
from app.schemas.admin import PriceSuggestionRequest, PriceSuggestionResponse

MARLA_PER_KANAL = 20

CITY_BASE_PRICES = {
    "Lahore": 10000,
    "Karachi": 12000,
    "Islamabad": 15000,
    "Rawalpindi": 9000,
    "Faisalabad": 7000,
    "Multan": 6000,
    "Peshawar": 8000,
    "Quetta": 7500,
}
OTHER_CITY_BASE_PRICE = 5000

PROPERTY_TYPE_MULTIPLIERS = {
    "House": 1.0,
    "Apartment": 0.9,
    "Villa": 1.4,
    "Portion": 0.7,
}

BEDROOM_PRICE = 5000
FLOOR_PRICE = 2000
KITCHEN_PRICE = 1000
LAWN_PRICE = 3000
FURNISHED_MULTIPLIER = 1.2
JITTER_LOW, JITTER_SPAN = 0.95, 0.1
RANGE_SPREAD = 0.1


def _round_thousand(value: float) -> int:
    # Half rounds up, not to even
    return int((value / 1000) + 0.5) * 1000


def area_in_marla(area: float, area_unit: str) -> float:
    return area * MARLA_PER_KANAL if area_unit == "Kanal" else area


def base_rent(data: PriceSuggestionRequest) -> float:
    """Estimate before jitter."""
    per_marla = CITY_BASE_PRICES.get(data.city, OTHER_CITY_BASE_PRICE)
    price = per_marla * area_in_marla(data.area, data.area_unit)
    price *= PROPERTY_TYPE_MULTIPLIERS.get(data.property_type, 1.0)
    price += data.bedrooms * BEDROOM_PRICE
    price += data.floors * FLOOR_PRICE
    price += data.kitchens * KITCHEN_PRICE
    if data.has_lawn:
        price += LAWN_PRICE
    if data.furnishing_status == "furnished":
        price *= FURNISHED_MULTIPLIER
    return price


def suggest_price(data: PriceSuggestionRequest, rng: random.Random | None = None) -> PriceSuggestionResponse:
    rng = rng or random.Random()
    factor = JITTER_LOW + rng.random() * JITTER_SPAN
    suggested = _round_thousand(base_rent(data) * factor)
    return PriceSuggestionResponse(
        suggested_price=suggested,
        range_low=round(suggested * (1 - RANGE_SPREAD)),
        range_high=round(suggested * (1 + RANGE_SPREAD)),
    )
