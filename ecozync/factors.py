# ecozync/factors.py
# Emission factors from public reference datasets (EPA, DEFRA, IPCC, Oxford,
# Poore & Nemecek, C40, EEA). All values are kg CO2e per unit.
# The table is built once at import and is read-only; changing a value means
# shipping a new release.
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Optional


@dataclass(frozen=True)
class EmissionFactor:
    factor: float
    unit: str
    source: str
    region: str
    year: int
    category: str
    subcategory: str


def _f(factor, unit, source, region, year, category, subcategory):
    return EmissionFactor(factor, unit, source, region, year, category, subcategory)


_KWH = "kg CO2e/kWh"
_KM = "kg CO2e/km"
_KG = "kg CO2e/kg"
_ITEM = "kg CO2e/item"
_YEAR = "kg CO2e/year"

_DEFRA = ("DEFRA 2023", "UK", 2023)
_POORE = ("Poore & Nemecek 2018", "Global", 2018)
_OXFORD = ("Oxford 2023", "Global", 2023)
_C40 = ("C40 Cities 2019", "Global", 2019)
_ELLEN = ("Ellen MacArthur 2017", "Global", 2017)
_EPA = ("EPA 2023", "US", 2023)

_TABLE = {
    "electricity": {
        "eu_average": _f(0.295, _KWH, "EEA 2023", "EU", 2023, "energy", "electricity"),
        "germany": _f(0.420, _KWH, "UBA 2023", "DE", 2023, "energy", "electricity"),
        "france": _f(0.057, _KWH, "RTE 2023", "FR", 2023, "energy", "electricity"),
        "uk": _f(0.193, _KWH, *_DEFRA, "energy", "electricity"),
        "us_average": _f(0.393, _KWH, *_EPA, "energy", "electricity"),
        "renewable": _f(0.020, _KWH, "IPCC 2014", "Global", 2014, "energy", "renewable"),
    },
    "heating": {
        "natural_gas": _f(0.202, _KWH, *_DEFRA, "energy", "natural_gas"),
        "heating_oil": _f(0.245, _KWH, *_DEFRA, "energy", "heating_oil"),
        "lpg": _f(0.214, _KWH, *_DEFRA, "energy", "lpg"),
        "coal": _f(0.364, _KWH, *_DEFRA, "energy", "coal"),
    },
    "transport": {
        "car_petrol_small": _f(0.154, _KM, *_DEFRA, "transport", "car_petrol_small"),
        "car_petrol_medium": _f(0.192, _KM, *_DEFRA, "transport", "car_petrol_medium"),
        "car_petrol_large": _f(0.282, _KM, *_DEFRA, "transport", "car_petrol_large"),
        "car_diesel_small": _f(0.142, _KM, *_DEFRA, "transport", "car_diesel_small"),
        "car_diesel_medium": _f(0.171, _KM, *_DEFRA, "transport", "car_diesel_medium"),
        "car_diesel_large": _f(0.209, _KM, *_DEFRA, "transport", "car_diesel_large"),
        "car_hybrid": _f(0.109, _KM, *_DEFRA, "transport", "car_hybrid"),
        "car_electric": _f(0.047, _KM, *_DEFRA, "transport", "car_electric"),
        "bus_local": _f(0.082, _KM, *_DEFRA, "transport", "bus_local"),
        "bus_coach": _f(0.028, _KM, *_DEFRA, "transport", "bus_coach"),
        "train_local": _f(0.035, _KM, *_DEFRA, "transport", "train_local"),
        "train_intercity": _f(0.028, _KM, *_DEFRA, "transport", "train_intercity"),
        "metro_tram": _f(0.030, _KM, *_DEFRA, "transport", "metro"),
        "bicycle": _f(0.006, _KM, *_DEFRA, "transport", "bicycle"),
        "walking": _f(0.000, _KM, *_DEFRA, "transport", "walking"),
        "motorcycle_small": _f(0.084, _KM, *_DEFRA, "transport", "motorcycle_small"),
        "motorcycle_large": _f(0.134, _KM, *_DEFRA, "transport", "motorcycle_large"),
    },
    "aviation": {
        # short haul < 3h, medium 3-6h, long > 6h; per passenger km
        "flight_short_economy": _f(0.255, _KM, *_DEFRA, "aviation", "short_economy"),
        "flight_short_business": _f(0.383, _KM, *_DEFRA, "aviation", "short_business"),
        "flight_medium_economy": _f(0.195, _KM, *_DEFRA, "aviation", "medium_economy"),
        "flight_medium_business": _f(0.312, _KM, *_DEFRA, "aviation", "medium_business"),
        "flight_long_economy": _f(0.150, _KM, *_DEFRA, "aviation", "long_economy"),
        "flight_long_premium": _f(0.240, _KM, *_DEFRA, "aviation", "long_premium"),
        "flight_long_business": _f(0.435, _KM, *_DEFRA, "aviation", "long_business"),
        "flight_long_first": _f(0.600, _KM, *_DEFRA, "aviation", "long_first"),
    },
    "diet": {
        # annual totals by diet type
        "meat_daily": _f(3300, _YEAR, *_OXFORD, "diet", "high_meat"),
        "meat_sometimes": _f(2000, _YEAR, *_OXFORD, "diet", "medium_meat"),
        "vegetarian": _f(1700, _YEAR, *_OXFORD, "diet", "vegetarian"),
        "vegan": _f(1200, _YEAR, *_OXFORD, "diet", "vegan"),
        # individual foods
        "beef": _f(60.0, _KG, *_POORE, "food", "beef"),
        "lamb": _f(24.5, _KG, *_POORE, "food", "lamb"),
        "pork": _f(7.6, _KG, *_POORE, "food", "pork"),
        "chicken": _f(6.9, _KG, *_POORE, "food", "chicken"),
        "fish_farmed": _f(13.6, _KG, *_POORE, "food", "fish_farmed"),
        "fish_wild": _f(5.4, _KG, *_POORE, "food", "fish_wild"),
        "dairy_milk": _f(3.2, _KG, *_POORE, "food", "dairy_milk"),
        "cheese": _f(21.2, _KG, *_POORE, "food", "cheese"),
        "vegetables": _f(2.0, _KG, *_POORE, "food", "vegetables"),
        "fruits": _f(1.1, _KG, *_POORE, "food", "fruits"),
        "grains": _f(1.4, _KG, *_POORE, "food", "grains"),
    },
    "consumption": {
        "t_shirt": _f(8.5, _ITEM, *_ELLEN, "clothing", "t_shirt"),
        "jeans": _f(33.4, _ITEM, *_ELLEN, "clothing", "jeans"),
        "dress": _f(47.0, _ITEM, *_ELLEN, "clothing", "dress"),
        "shoes": _f(30.0, _ITEM, *_ELLEN, "clothing", "shoes"),
        "smartphone": _f(85.0, _ITEM, "Apple 2023", "Global", 2023, "electronics", "smartphone"),
        "laptop": _f(300.0, _ITEM, "Dell 2023", "Global", 2023, "electronics", "laptop"),
        "tablet": _f(130.0, _ITEM, "Apple 2023", "Global", 2023, "electronics", "tablet"),
        "tv_55inch": _f(1200.0, _ITEM, "Samsung 2023", "Global", 2023, "electronics", "tv"),
        # annual totals by shopping frequency
        "shopping_monthly": _f(2400, _YEAR, *_C40, "consumption", "high_consumption"),
        "shopping_quarterly": _f(1200, _YEAR, *_C40, "consumption", "medium_consumption"),
        "shopping_yearly": _f(600, _YEAR, *_C40, "consumption", "low_consumption"),
        "shopping_rarely": _f(300, _YEAR, *_C40, "consumption", "minimal_consumption"),
    },
    "waste": {
        "landfill": _f(1.84, _KG, *_DEFRA, "waste", "landfill"),
        "recycling": _f(0.02, _KG, *_DEFRA, "waste", "recycling"),
        "composting": _f(0.15, _KG, *_DEFRA, "waste", "composting"),
        "incineration": _f(0.21, _KG, *_DEFRA, "waste", "incineration"),
        # annual household totals by waste handling
        "waste_everything_trash": _f(580, _YEAR, *_EPA, "waste", "no_recycling"),
        "waste_some_recycling": _f(350, _YEAR, *_EPA, "waste", "some_recycling"),
        "waste_mostly_recycle": _f(150, _YEAR, *_EPA, "waste", "high_recycling"),
        "waste_compost_recycle": _f(80, _YEAR, *_EPA, "waste", "compost_recycle"),
    },
}

EMISSION_FACTORS = MappingProxyType({k: MappingProxyType(v) for k, v in _TABLE.items()})

# Smaller EU-only set used by the legacy calculation path.
LEGACY_EU_FACTORS = MappingProxyType({
    # energy, per kWh
    "natural_gas": 0.202,
    "electricity": 0.266,
    "renewable_electricity": 0.02,
    "oil": 0.267,
    # transport, per km
    "car_gasoline": 0.21,
    "car_diesel": 0.169,
    "car_electric": 0.053,
    "car_hybrid": 0.109,
    "public_transport": 0.04,
    # aviation, per km
    "flight_short": 0.255,
    "flight_medium": 0.195,
    "flight_long": 0.150,
    # diet, tonnes per year
    "diet_vegan": 1.0,
    "diet_vegetarian": 1.5,
    "diet_pescatarian": 2.0,
    "diet_omnivore": 3.0,
    # lifestyle, kg per year
    "shopping_frequent": 1200,
    "shopping_moderate": 800,
    "shopping_low": 400,
    "shopping_minimal": 200,
})

# Multipliers applied to lifestyle emissions by the legacy path.
LEGACY_WASTE_REDUCTION = MappingProxyType({
    "everything_trash": 1.0,
    "some_recycling": 0.85,
    "mostly_recycle": 0.6,
    "compost_too": 0.4,
})

ELECTRICITY_REGIONS = MappingProxyType({
    "eu": "eu_average",
    "europe": "eu_average",
    "de": "germany",
    "germany": "germany",
    "fr": "france",
    "france": "france",
    "uk": "uk",
    "united kingdom": "uk",
    "us": "us_average",
    "usa": "us_average",
    "united states": "us_average",
})

TRANSPORT_MODES = MappingProxyType({
    "car": "car_petrol_medium",
    "car_alone": "car_petrol_medium",
    "car_carpool": "car_petrol_medium",
    "public_transport": "bus_local",
    "bus": "bus_local",
    "train": "train_local",
    "metro": "metro_tram",
    "bike": "bicycle",
    "bicycle": "bicycle",
    "walk": "walking",
    "walking": "walking",
})

DATA_SOURCES = MappingProxyType({
    "defra": {
        "name": "UK Department for Environment, Food and Rural Affairs",
        "url": "https://www.gov.uk/government/publications/greenhouse-gas-reporting-conversion-factors-2023",
        "year": 2023,
    },
    "epa": {
        "name": "US Environmental Protection Agency",
        "url": "https://www.epa.gov/egrid/summary-data",
        "year": 2023,
    },
    "ipcc": {
        "name": "Intergovernmental Panel on Climate Change",
        "url": "https://www.ipcc.ch/report/ar5/wg3/",
        "year": 2014,
    },
    "oxford": {
        "name": "University of Oxford - Environmental Research Letters",
        "url": "https://iopscience.iop.org/article/10.1088/1748-9326/ac861c",
        "year": 2023,
    },
    "poore_nemecek": {
        "name": "Poore & Nemecek - Science Journal",
        "url": "https://science.sciencemag.org/content/360/6392/987",
        "year": 2018,
    },
})


def get_emission_factor(category: str, subcategory: str) -> Optional[EmissionFactor]:
    return EMISSION_FACTORS.get(category, {}).get(subcategory)


def default_electricity_factor(region: str = "eu") -> EmissionFactor:
    key = ELECTRICITY_REGIONS.get((region or "").lower(), "eu_average")
    return EMISSION_FACTORS["electricity"][key]


def default_transport_factor(mode: str) -> EmissionFactor:
    key = TRANSPORT_MODES.get((mode or "").lower(), "car_petrol_medium")
    return EMISSION_FACTORS["transport"][key]


def factor_table_as_dict():
    """Plain-dict copy of the table for JSON responses."""
    return {
        category: {name: asdict(f) for name, f in entries.items()}
        for category, entries in EMISSION_FACTORS.items()
    }
