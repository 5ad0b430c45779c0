# ecozync/utils.py
# Per-category emission formulas. Every function takes a SurveyResponse and
# returns the unrounded annual kg CO2e for one category.
import math

from .factors import (
    EMISSION_FACTORS,
    LEGACY_EU_FACTORS,
    LEGACY_WASTE_REDUCTION,
    default_electricity_factor,
)
from .schemas import (
    DietType,
    FuelType,
    HeatingType,
    ShoppingFrequency,
    TransportMode,
    WasteManagement,
)

ASSUMED_PRICE_PER_KWH = 0.25  # EUR
WEEKS_PER_YEAR = 52
CARPOOL_SHARE = 0.5

# average distance per flight, km
SHORT_HAUL_KM = 500
MEDIUM_HAUL_KM = 1500
LONG_HAUL_KM = 8000


def parse_choice(enum_cls, value, default):
    """Map a raw answer onto its enumeration, or the category default."""
    try:
        return enum_cls(value)
    except ValueError:
        return default


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def annual_kwh(monthly_bill: float) -> float:
    return (monthly_bill * 12) / ASSUMED_PRICE_PER_KWH


def annual_km(weekly_km: float) -> float:
    return weekly_km * WEEKS_PER_YEAR


# -----------------
# Comprehensive factors
# -----------------
DEFAULT_HEATING = HeatingType.ELECTRIC
HEATING_FACTORS = {
    HeatingType.GAS: EMISSION_FACTORS["heating"]["natural_gas"],
    HeatingType.RENEWABLE: EMISSION_FACTORS["electricity"]["renewable"],
    HeatingType.OIL: EMISSION_FACTORS["heating"]["heating_oil"],
    HeatingType.ELECTRIC: default_electricity_factor("eu"),
}

DEFAULT_FUEL = FuelType.GASOLINE
CAR_FACTORS = {
    FuelType.ELECTRIC: EMISSION_FACTORS["transport"]["car_electric"],
    FuelType.HYBRID: EMISSION_FACTORS["transport"]["car_hybrid"],
    FuelType.DIESEL: EMISSION_FACTORS["transport"]["car_diesel_medium"],
    FuelType.GASOLINE: EMISSION_FACTORS["transport"]["car_petrol_medium"],
}
PUBLIC_TRANSPORT_FACTOR = EMISSION_FACTORS["transport"]["bus_local"]

FLIGHT_FACTORS = (
    (SHORT_HAUL_KM, EMISSION_FACTORS["aviation"]["flight_short_economy"]),
    (MEDIUM_HAUL_KM, EMISSION_FACTORS["aviation"]["flight_medium_economy"]),
    (LONG_HAUL_KM, EMISSION_FACTORS["aviation"]["flight_long_economy"]),
)

DEFAULT_DIET = DietType.OMNIVORE
DIET_FACTORS = {
    DietType.VEGAN: EMISSION_FACTORS["diet"]["vegan"],
    DietType.VEGETARIAN: EMISSION_FACTORS["diet"]["vegetarian"],
    # no dedicated pescatarian figure; grouped with occasional meat eaters
    DietType.PESCATARIAN: EMISSION_FACTORS["diet"]["meat_sometimes"],
    DietType.OMNIVORE: EMISSION_FACTORS["diet"]["meat_daily"],
}

DEFAULT_SHOPPING = ShoppingFrequency.YEARLY
SHOPPING_FACTORS = {
    ShoppingFrequency.MONTHLY: EMISSION_FACTORS["consumption"]["shopping_monthly"],
    ShoppingFrequency.EVERY_FEW_MONTHS: EMISSION_FACTORS["consumption"]["shopping_quarterly"],
    ShoppingFrequency.YEARLY: EMISSION_FACTORS["consumption"]["shopping_yearly"],
    ShoppingFrequency.RARELY: EMISSION_FACTORS["consumption"]["shopping_rarely"],
}

DEFAULT_WASTE = WasteManagement.SOME_RECYCLING
WASTE_FACTORS = {
    WasteManagement.EVERYTHING_TRASH: EMISSION_FACTORS["waste"]["waste_everything_trash"],
    WasteManagement.SOME_RECYCLING: EMISSION_FACTORS["waste"]["waste_some_recycling"],
    WasteManagement.MOSTLY_RECYCLE: EMISSION_FACTORS["waste"]["waste_mostly_recycle"],
    WasteManagement.COMPOST_TOO: EMISSION_FACTORS["waste"]["waste_compost_recycle"],
}


def calc_energy(response):
    heating = parse_choice(HeatingType, response.heating_type, DEFAULT_HEATING)
    return annual_kwh(response.monthly_energy_bill) * HEATING_FACTORS[heating].factor


def calc_transport(response):
    mode = parse_choice(TransportMode, response.primary_transport, None)
    if mode is TransportMode.BIKE_WALK:
        return 0.0
    km = annual_km(response.weekly_km)
    if mode is TransportMode.PUBLIC_TRANSPORT:
        return km * PUBLIC_TRANSPORT_FACTOR.factor
    # anything else is a car
    fuel = parse_choice(FuelType, response.fuel_type, DEFAULT_FUEL)
    share = CARPOOL_SHARE if mode is TransportMode.CAR_CARPOOL else 1.0
    return km * CAR_FACTORS[fuel].factor * share


def calc_aviation(response):
    counts = (response.short_flights, response.medium_flights, response.long_flights)
    return sum(n * km * f.factor for n, (km, f) in zip(counts, FLIGHT_FACTORS))


def calc_diet(response):
    diet = parse_choice(DietType, response.diet_type, DEFAULT_DIET)
    return DIET_FACTORS[diet].factor


def calc_lifestyle(response):
    shopping = parse_choice(ShoppingFrequency, response.shopping_frequency, DEFAULT_SHOPPING)
    return SHOPPING_FACTORS[shopping].factor


def calc_waste(response):
    waste = parse_choice(WasteManagement, response.waste_management, DEFAULT_WASTE)
    return WASTE_FACTORS[waste].factor


# -----------------
# Legacy EU factors
# -----------------
LEGACY_HEATING_FACTORS = {
    HeatingType.GAS: LEGACY_EU_FACTORS["natural_gas"],
    HeatingType.RENEWABLE: LEGACY_EU_FACTORS["renewable_electricity"],
    HeatingType.OIL: LEGACY_EU_FACTORS["oil"],
    HeatingType.ELECTRIC: LEGACY_EU_FACTORS["electricity"],
}

LEGACY_CAR_FACTORS = {
    FuelType.ELECTRIC: LEGACY_EU_FACTORS["car_electric"],
    FuelType.HYBRID: LEGACY_EU_FACTORS["car_hybrid"],
    FuelType.DIESEL: LEGACY_EU_FACTORS["car_diesel"],
    FuelType.GASOLINE: LEGACY_EU_FACTORS["car_gasoline"],
}

LEGACY_FLIGHT_FACTORS = (
    (SHORT_HAUL_KM, LEGACY_EU_FACTORS["flight_short"]),
    (MEDIUM_HAUL_KM, LEGACY_EU_FACTORS["flight_medium"]),
    (LONG_HAUL_KM, LEGACY_EU_FACTORS["flight_long"]),
)

LEGACY_DIET_TONNES = {
    DietType.VEGAN: LEGACY_EU_FACTORS["diet_vegan"],
    DietType.VEGETARIAN: LEGACY_EU_FACTORS["diet_vegetarian"],
    DietType.PESCATARIAN: LEGACY_EU_FACTORS["diet_pescatarian"],
    DietType.OMNIVORE: LEGACY_EU_FACTORS["diet_omnivore"],
}

LEGACY_SHOPPING_FACTORS = {
    ShoppingFrequency.MONTHLY: LEGACY_EU_FACTORS["shopping_frequent"],
    ShoppingFrequency.EVERY_FEW_MONTHS: LEGACY_EU_FACTORS["shopping_moderate"],
    ShoppingFrequency.YEARLY: LEGACY_EU_FACTORS["shopping_low"],
    ShoppingFrequency.RARELY: LEGACY_EU_FACTORS["shopping_minimal"],
}


def calc_energy_legacy(response):
    heating = parse_choice(HeatingType, response.heating_type, DEFAULT_HEATING)
    return annual_kwh(response.monthly_energy_bill) * LEGACY_HEATING_FACTORS[heating]


def calc_transport_legacy(response):
    mode = parse_choice(TransportMode, response.primary_transport, None)
    if mode is TransportMode.BIKE_WALK:
        return 0.0
    km = annual_km(response.weekly_km)
    if mode is TransportMode.PUBLIC_TRANSPORT:
        return km * LEGACY_EU_FACTORS["public_transport"]
    fuel = parse_choice(FuelType, response.fuel_type, DEFAULT_FUEL)
    share = CARPOOL_SHARE if mode is TransportMode.CAR_CARPOOL else 1.0
    return km * LEGACY_CAR_FACTORS[fuel] * share


def calc_aviation_legacy(response):
    counts = (response.short_flights, response.medium_flights, response.long_flights)
    return sum(n * km * f for n, (km, f) in zip(counts, LEGACY_FLIGHT_FACTORS))


def calc_diet_legacy(response):
    diet = parse_choice(DietType, response.diet_type, DEFAULT_DIET)
    return LEGACY_DIET_TONNES[diet] * 1000


def calc_lifestyle_legacy(response):
    """Shopping emissions scaled down by how much waste is recycled."""
    shopping = parse_choice(ShoppingFrequency, response.shopping_frequency, DEFAULT_SHOPPING)
    reduction = LEGACY_WASTE_REDUCTION.get(response.waste_management, 1.0)
    return LEGACY_SHOPPING_FACTORS[shopping] * reduction
