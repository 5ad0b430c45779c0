# ecozync/schemas.py
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# upper bounds keep every annual figure finite
MAX_MONTHLY_ENERGY_BILL = 1_000_000
MAX_WEEKLY_KM = 100_000
MAX_FLIGHTS = 1_000


# -----------------
# Survey answers
# -----------------
class HeatingType(str, Enum):
    GAS = "gas"
    ELECTRIC = "electric"
    RENEWABLE = "renewable"
    OIL = "oil"


class TransportMode(str, Enum):
    CAR_ALONE = "car_alone"
    CAR_CARPOOL = "car_carpool"
    PUBLIC_TRANSPORT = "public_transport"
    BIKE_WALK = "bike_walk"


class FuelType(str, Enum):
    GASOLINE = "gasoline"
    DIESEL = "diesel"
    ELECTRIC = "electric"
    HYBRID = "hybrid"


class DietType(str, Enum):
    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    PESCATARIAN = "pescatarian"
    OMNIVORE = "omnivore"


class ShoppingFrequency(str, Enum):
    MONTHLY = "monthly"
    EVERY_FEW_MONTHS = "every_few_months"
    YEARLY = "yearly"
    RARELY = "rarely"


class WasteManagement(str, Enum):
    EVERYTHING_TRASH = "everything_trash"
    SOME_RECYCLING = "some_recycling"
    MOSTLY_RECYCLE = "mostly_recycle"
    COMPOST_TOO = "compost_too"


class SurveyResponse(BaseModel):
    """Normalized answers to the eight survey questions.

    Categorical fields are plain strings: values outside their enumeration are
    accepted here and resolved to a per-category default by the calculator.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    heating_type: str = HeatingType.ELECTRIC.value
    monthly_energy_bill: float = Field(ge=0, le=MAX_MONTHLY_ENERGY_BILL)
    primary_transport: str = TransportMode.CAR_ALONE.value
    fuel_type: Optional[str] = None  # only read for car travel
    weekly_km: float = Field(ge=0, le=MAX_WEEKLY_KM)
    short_flights: int = Field(default=0, ge=0, le=MAX_FLIGHTS)
    medium_flights: int = Field(default=0, ge=0, le=MAX_FLIGHTS)
    long_flights: int = Field(default=0, ge=0, le=MAX_FLIGHTS)
    diet_type: str = DietType.OMNIVORE.value
    shopping_frequency: str = ShoppingFrequency.YEARLY.value
    waste_management: str = WasteManagement.SOME_RECYCLING.value


class EmissionBreakdown(BaseModel):
    """Annual emissions in kg CO2e, one integer per category."""
    model_config = ConfigDict(frozen=True)

    transport_emissions: int = Field(ge=0)
    energy_emissions: int = Field(ge=0)
    diet_emissions: int = Field(ge=0)
    lifestyle_emissions: int = Field(ge=0)
    travel_emissions: int = Field(ge=0)  # aviation
    other_emissions: int = Field(ge=0)  # waste
    total_emissions: int = Field(ge=0)
    confidence_score: float = Field(ge=0, le=1)
    calculation_method: str


# -----------------
# Raw assessment (form state)
# -----------------
class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class EnergyAnswers(_Section):
    heating_type: Optional[str] = None
    monthly_energy_cost: Optional[str] = None  # "0-50", "50-100", ...


class TransportAnswers(_Section):
    primary_transport: Optional[str] = None
    fuel_type: Optional[str] = None
    weekly_distance: Optional[str] = None  # "0-50", "50-150", ...
    annual_flights: Optional[str] = None  # "none", "1-2", ...


class DietAnswers(_Section):
    diet_type: Optional[str] = None


class LifestyleAnswers(_Section):
    shopping_frequency: Optional[str] = None
    waste_management: Optional[str] = None


class AssessmentData(BaseModel):
    energy: EnergyAnswers = Field(default_factory=EnergyAnswers)
    transport: TransportAnswers = Field(default_factory=TransportAnswers)
    diet: DietAnswers = Field(default_factory=DietAnswers)
    lifestyle: LifestyleAnswers = Field(default_factory=LifestyleAnswers)


# -----------------
# Auth
# -----------------
class SignupIn(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    password: str


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    token: str
    user_id: str
    first_name: str
    last_name: str
    email: EmailStr


# -----------------
# Results & persistence
# -----------------
class ImpactLevel(BaseModel):
    level: str
    color: str
    message: str


class ComparisonMetrics(BaseModel):
    vs_eu_average: float
    vs_global_average: float
    vs_paris_target: float
    trees_to_offset: int
    cars_off_road: float
    households_days: float


class CalculationResult(BaseModel):
    results: EmissionBreakdown
    impact: ImpactLevel
    comparisons: ComparisonMetrics
    saved: bool = False
    calculation_id: Optional[str] = None


class CalculationIn(BaseModel):
    calculation_date: date
    assessment_data: Dict[str, Any] = Field(default_factory=dict)
    transport_emissions: int = Field(default=0, ge=0)
    energy_emissions: int = Field(default=0, ge=0)
    diet_emissions: int = Field(default=0, ge=0)
    lifestyle_emissions: int = Field(default=0, ge=0)
    travel_emissions: int = Field(default=0, ge=0)
    other_emissions: int = Field(default=0, ge=0)
    calculation_method: Optional[str] = "local_enhanced"
    calculation_confidence: float = Field(default=0.9, ge=0, le=1)


class CalculationUpdate(BaseModel):
    calculation_date: Optional[date] = None
    assessment_data: Optional[Dict[str, Any]] = None
    transport_emissions: Optional[int] = Field(default=None, ge=0)
    energy_emissions: Optional[int] = Field(default=None, ge=0)
    diet_emissions: Optional[int] = Field(default=None, ge=0)
    lifestyle_emissions: Optional[int] = Field(default=None, ge=0)
    travel_emissions: Optional[int] = Field(default=None, ge=0)
    other_emissions: Optional[int] = Field(default=None, ge=0)
    calculation_method: Optional[str] = None
    calculation_confidence: Optional[float] = Field(default=None, ge=0, le=1)


class CalculationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    calculation_date: date
    assessment_data: Dict[str, Any]
    transport_emissions: int
    energy_emissions: int
    diet_emissions: int
    lifestyle_emissions: int
    travel_emissions: int
    other_emissions: int
    total_emissions: int
    calculation_method: Optional[str]
    calculation_confidence: float
    created_at: datetime
    updated_at: datetime


class CalculationPage(BaseModel):
    data: List[CalculationOut]
    count: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool
