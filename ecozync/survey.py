# ecozync/survey.py
# The eight survey questions and the mapping from their range answers to the
# numeric SurveyResponse. The bucket values are fixed: stored results and the
# impact bands depend on them.
from .schemas import AssessmentData, SurveyResponse

ENERGY_BILL_BUCKETS = {"0-50": 25, "50-100": 75, "100-200": 150, "200+": 250}
DEFAULT_ENERGY_BILL = 150

WEEKLY_KM_BUCKETS = {"0-50": 25, "50-150": 100, "150-300": 225, "300+": 400}
DEFAULT_WEEKLY_KM = 100

# (short, medium, long)
FLIGHT_BUCKETS = {
    "none": (0, 0, 0),
    "1-2": (1, 1, 0),
    "3-5": (2, 2, 1),
    "6+": (3, 3, 2),
}
NO_FLIGHTS = (0, 0, 0)


def convert_energy_bill(cost_range):
    return ENERGY_BILL_BUCKETS.get(cost_range, DEFAULT_ENERGY_BILL)


def convert_weekly_distance(distance_range):
    return WEEKLY_KM_BUCKETS.get(distance_range, DEFAULT_WEEKLY_KM)


def convert_annual_flights(flight_range):
    return FLIGHT_BUCKETS.get(flight_range, NO_FLIGHTS)


def convert_assessment_to_responses(assessment: AssessmentData) -> SurveyResponse:
    energy, transport = assessment.energy, assessment.transport
    short, medium, long_ = convert_annual_flights(transport.annual_flights or "none")
    return SurveyResponse(
        heating_type=energy.heating_type or "electric",
        monthly_energy_bill=convert_energy_bill(energy.monthly_energy_cost),
        primary_transport=transport.primary_transport or "car_alone",
        fuel_type=transport.fuel_type or "gasoline",
        weekly_km=convert_weekly_distance(transport.weekly_distance),
        short_flights=short,
        medium_flights=medium,
        long_flights=long_,
        diet_type=assessment.diet.diet_type or "omnivore",
        shopping_frequency=assessment.lifestyle.shopping_frequency or "yearly",
        waste_management=assessment.lifestyle.waste_management or "some_recycling",
    )


def _opt(value, label, description, impact):
    return {"value": value, "label": label, "description": description, "impact": impact}


# Each question fills assessment[section][field].
QUESTIONS = [
    {
        "id": 1, "section": "energy", "field": "heating_type",
        "title": "How do you heat your home?",
        "options": [
            _opt("gas", "Natural Gas", "Traditional gas heating", "High"),
            _opt("electric", "Electricity", "Electric heating", "Medium"),
            _opt("renewable", "Renewable", "Solar, heat pump, etc.", "Low"),
            _opt("oil", "Oil", "Oil-based heating", "Very High"),
        ],
    },
    {
        "id": 2, "section": "energy", "field": "monthly_energy_cost",
        "title": "What is your monthly energy bill?",
        "options": [
            _opt("0-50", "€0-50", "Very efficient usage", "Very Low"),
            _opt("50-100", "€50-100", "Average household", "Low"),
            _opt("100-200", "€100-200", "Higher consumption", "Medium"),
            _opt("200+", "€200+", "Significant usage", "High"),
        ],
    },
    {
        "id": 3, "section": "transport", "field": "primary_transport",
        "title": "How do you usually get around?",
        "options": [
            _opt("car_alone", "Car (alone)", "Alone most of the time", "High"),
            _opt("car_carpool", "Car (carpool)", "Share rides regularly", "Medium"),
            _opt("public_transport", "Public transport", "Bus, train, metro", "Low"),
            _opt("bike_walk", "Bike or walk", "Active transportation", "Very Low"),
        ],
    },
    {
        "id": 4, "section": "transport", "field": "weekly_distance",
        "title": "How far do you travel each week?",
        "options": [
            _opt("0-50", "0-50 km", "Mostly local travel", "Very Low"),
            _opt("50-150", "50-150 km", "Moderate commute", "Low"),
            _opt("150-300", "150-300 km", "Regular driving", "Medium"),
            _opt("300+", "300+ km", "Long distance commuter", "High"),
        ],
    },
    {
        "id": 5, "section": "transport", "field": "annual_flights",
        "title": "How many flights do you take per year?",
        "options": [
            _opt("none", "No flights", "I avoid flying", "None"),
            _opt("1-2", "1-2 flights", "Occasional travel", "Low"),
            _opt("3-5", "3-5 flights", "Regular traveler", "Medium"),
            _opt("6+", "6+ flights", "Frequent flyer", "High"),
        ],
    },
    {
        "id": 6, "section": "diet", "field": "diet_type",
        "title": "Which best describes your diet?",
        "options": [
            _opt("vegan", "Vegan", "Plant-based diet only", "Very Low"),
            _opt("vegetarian", "Vegetarian", "Includes dairy & eggs", "Low"),
            _opt("pescatarian", "Pescatarian", "Fish but no other meat", "Medium"),
            _opt("omnivore", "Omnivore", "Balanced meat & plants", "High"),
        ],
    },
    {
        "id": 7, "section": "lifestyle", "field": "shopping_frequency",
        "title": "How often do you buy new clothes or gadgets?",
        "options": [
            _opt("rarely", "Rarely", "I have stuff for years", "Very Low"),
            _opt("yearly", "Yearly", "Only when necessary", "Low"),
            _opt("every_few_months", "Every few months", "Occasional purchases", "Medium"),
            _opt("monthly", "Monthly", "I buy new items often", "High"),
        ],
    },
    {
        "id": 8, "section": "lifestyle", "field": "waste_management",
        "title": "What happens to your household waste?",
        "options": [
            _opt("compost_too", "Compost too", "Recycle + compost", "Very Low"),
            _opt("mostly_recycle", "Mostly recycle", "Careful separation", "Low"),
            _opt("some_recycling", "Some recycling", "Basic recycling", "Medium"),
            _opt("everything_trash", "Everything in trash", "Most waste to the bin", "High"),
        ],
    },
]


def answer_question(assessment: dict, question: dict, value: str) -> dict:
    """Return a copy of the raw assessment dict with one answer filled in."""
    section = dict(assessment.get(question["section"]) or {})
    section[question["field"]] = value
    return {**assessment, question["section"]: section}
