# ecozync/calculator.py
"""Annual carbon footprint from survey answers.

``calculate_local`` uses the comprehensive factor table, ``calculate_local_legacy``
the older EU-only set. ``calculate_emissions`` tries them in that order. Both are
pure: no I/O, no shared state, the same answers always give the same breakdown.
"""
import logging
import math

from . import utils
from .schemas import EmissionBreakdown, SurveyResponse

logger = logging.getLogger(__name__)

METHOD_ENHANCED = "local_enhanced"
METHOD_LEGACY = "local_legacy"

# kg CO2e per person per year
EU_AVERAGE = 8500
GLOBAL_AVERAGE = 4800
PARIS_TARGET = 2300  # 1.5C pathway
TREE_ABSORPTION = 22  # per tree per year
CAR_ANNUAL = 4600  # average car

IMPACT_LEVELS = (
    (2000, "Excellent", "#22c55e", "You have a very low carbon footprint!"),
    (4000, "Good", "#84cc16", "Your footprint is below average - well done!"),
    (8000, "Average", "#eab308", "Your footprint is typical for your region."),
    (12000, "High", "#f97316", "There's significant room for improvement."),
)
VERY_HIGH = ("Very High", "#ef4444", "Consider major lifestyle changes for the planet.")


class CalculationError(Exception):
    """Neither the comprehensive nor the legacy calculation could run."""


def _breakdown(confidence, method, **categories):
    rounded = {name: utils.round_half_up(value) for name, value in categories.items()}
    return EmissionBreakdown(
        **rounded,
        total_emissions=sum(rounded.values()),
        confidence_score=confidence,
        calculation_method=method,
    )


def calculate_local(response: SurveyResponse) -> EmissionBreakdown:
    return _breakdown(
        0.90,
        METHOD_ENHANCED,
        transport_emissions=utils.calc_transport(response),
        energy_emissions=utils.calc_energy(response),
        diet_emissions=utils.calc_diet(response),
        lifestyle_emissions=utils.calc_lifestyle(response),
        travel_emissions=utils.calc_aviation(response),
        other_emissions=utils.calc_waste(response),
    )


def calculate_local_legacy(response: SurveyResponse) -> EmissionBreakdown:
    # waste is folded into lifestyle on this path
    return _breakdown(
        0.85,
        METHOD_LEGACY,
        transport_emissions=utils.calc_transport_legacy(response),
        energy_emissions=utils.calc_energy_legacy(response),
        diet_emissions=utils.calc_diet_legacy(response),
        lifestyle_emissions=utils.calc_lifestyle_legacy(response),
        travel_emissions=utils.calc_aviation_legacy(response),
        other_emissions=0,
    )


CALCULATION_STRATEGIES = (
    (METHOD_ENHANCED, calculate_local),
    (METHOD_LEGACY, calculate_local_legacy),
)


def calculate_emissions(response: SurveyResponse) -> EmissionBreakdown:
    """Run the comprehensive calculation, falling back to the legacy one.

    Raises CalculationError only when every strategy failed.
    """
    errors = []
    for method, strategy in CALCULATION_STRATEGIES:
        try:
            return strategy(response)
        except Exception as e:
            logger.exception("%s calculation failed", method)
            errors.append(f"{method}: {e}")
    raise CalculationError("; ".join(errors))


def impact_level(total_emissions: float) -> dict:
    for ceiling, level, color, message in IMPACT_LEVELS:
        if total_emissions <= ceiling:
            return {"level": level, "color": color, "message": message}
    level, color, message = VERY_HIGH
    return {"level": level, "color": color, "message": message}


def _pct_diff(value, reference):
    return (value - reference) / reference * 100


def comparison_metrics(total_emissions: float) -> dict:
    return {
        "vs_eu_average": _pct_diff(total_emissions, EU_AVERAGE),
        "vs_global_average": _pct_diff(total_emissions, GLOBAL_AVERAGE),
        "vs_paris_target": _pct_diff(total_emissions, PARIS_TARGET),
        "trees_to_offset": math.ceil(total_emissions / TREE_ABSORPTION),
        "cars_off_road": total_emissions / CAR_ANNUAL,
        "households_days": total_emissions / (EU_AVERAGE / 365),
    }
