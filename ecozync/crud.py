# ecozync/crud.py
from . import models
from .calculator import EU_AVERAGE, GLOBAL_AVERAGE, PARIS_TARGET, TREE_ABSORPTION
from .utils import round_half_up
from sqlalchemy.orm import Session
from passlib.context import CryptContext
from collections import defaultdict
from datetime import date, datetime
import calendar, math, uuid

pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

CATEGORY_FIELDS = (
    "transport_emissions",
    "energy_emissions",
    "diet_emissions",
    "lifestyle_emissions",
    "travel_emissions",
    "other_emissions",
)
UPDATABLE_FIELDS = CATEGORY_FIELDS + (
    "calculation_date",
    "assessment_data",
    "calculation_method",
    "calculation_confidence",
)
MAX_PAGE_SIZE = 100
CAR_KG_PER_KM = 0.21

# Auth
def create_user(db: Session, first_name, last_name, email, password):
    hashed = pwd_ctx.hash(password)
    user = models.User(first_name=first_name, last_name=last_name, email=email,
                       password_hash=hashed, token=uuid.uuid4().hex)
    db.add(user); db.commit(); db.refresh(user)
    return user

def authenticate_user(db: Session, email, password):
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not pwd_ctx.verify(password, user.password_hash):
        return None
    # new token on every login
    user.token = uuid.uuid4().hex
    db.add(user); db.commit(); db.refresh(user)
    return user

def get_user_by_token(db: Session, token):
    if not token:
        return None
    return db.query(models.User).filter(models.User.token == token).first()

def get_user_by_email(db: Session, email):
    return db.query(models.User).filter(models.User.email == email).first()

# Calculations
def _total(calc):
    return sum(getattr(calc, f) or 0 for f in CATEGORY_FIELDS)

def upsert_calculation(db: Session, user_id, calculation_date, values: dict):
    """One calculation per user per day: update today's row or insert it.

    Returns (calculation, created).
    """
    calc = db.query(models.Calculation).filter(
        models.Calculation.user_id == user_id,
        models.Calculation.calculation_date == calculation_date,
    ).first()
    created = calc is None
    if created:
        calc = models.Calculation(user_id=user_id, calculation_date=calculation_date)
    for field in UPDATABLE_FIELDS:
        if field in values and field != "calculation_date":
            setattr(calc, field, values[field])
    calc.total_emissions = _total(calc)
    calc.updated_at = datetime.utcnow()
    db.add(calc); db.commit(); db.refresh(calc)
    return calc, created

def list_calculations(db: Session, user_id, page=1, page_size=20, start_date=None, end_date=None,
                      min_emissions=None, max_emissions=None):
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    q = db.query(models.Calculation).filter(models.Calculation.user_id == user_id)
    if start_date:
        q = q.filter(models.Calculation.calculation_date >= start_date)
    if end_date:
        q = q.filter(models.Calculation.calculation_date <= end_date)
    if min_emissions is not None:
        q = q.filter(models.Calculation.total_emissions >= min_emissions)
    if max_emissions is not None:
        q = q.filter(models.Calculation.total_emissions <= max_emissions)
    count = q.count()
    rows = (q.order_by(models.Calculation.calculation_date.desc())
             .offset((page - 1) * page_size).limit(page_size).all())
    return rows, count, page, page_size

def get_calculation(db: Session, user_id, calculation_id):
    return db.query(models.Calculation).filter(
        models.Calculation.id == calculation_id,
        models.Calculation.user_id == user_id,
    ).first()

def update_calculation(db: Session, calc, changes: dict):
    for field in UPDATABLE_FIELDS:
        if changes.get(field) is not None:
            setattr(calc, field, changes[field])
    calc.total_emissions = _total(calc)
    calc.updated_at = datetime.utcnow()
    db.add(calc); db.commit(); db.refresh(calc)
    return calc

def delete_calculation(db: Session, calc):
    db.delete(calc); db.commit()

# Stats
def _months_ago(day: date, months: int) -> date:
    year, month0 = divmod(day.year * 12 + day.month - 1 - months, 12)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(day.day, last_day))

def _comparisons(avg_total):
    return {
        "vs_eu_average": (avg_total - EU_AVERAGE) / EU_AVERAGE * 100,
        "vs_global_average": (avg_total - GLOBAL_AVERAGE) / GLOBAL_AVERAGE * 100,
        "vs_paris_target": (avg_total - PARIS_TARGET) / PARIS_TARGET * 100,
        "trees_to_offset": math.ceil(avg_total / TREE_ABSORPTION),
        "equivalent_car_kilometers": round_half_up(avg_total / CAR_KG_PER_KM),
    }

def _empty_stats():
    stats = {"total_calculations": 0, "avg_total_emissions": 0}
    stats.update({f"avg_{f}": 0 for f in CATEGORY_FIELDS})
    stats["monthly_trend"] = []
    stats["category_breakdown"] = {f"{f.split('_')[0]}_percentage": 0 for f in CATEGORY_FIELDS}
    stats["reduction_progress"] = None
    stats["comparison_metrics"] = {
        "vs_eu_average": 0, "vs_global_average": 0, "vs_paris_target": 0,
        "trees_to_offset": 0, "equivalent_car_kilometers": 0,
    }
    return stats

def calculation_stats(db: Session, user_id, months=12, today=None):
    rows = (db.query(models.Calculation)
              .filter(models.Calculation.user_id == user_id)
              .order_by(models.Calculation.calculation_date.asc()).all())
    if not rows:
        return _empty_stats()

    n = len(rows)
    avg_total = sum(r.total_emissions for r in rows) / n
    avgs = {f: sum(getattr(r, f) for r in rows) / n for f in CATEGORY_FIELDS}
    avg_sum = sum(avgs.values())
    breakdown = {
        f"{f.split('_')[0]}_percentage": (avgs[f] / avg_sum * 100) if avg_sum > 0 else 0
        for f in CATEGORY_FIELDS
    }

    cutoff = _months_ago(today or date.today(), months)
    monthly = defaultdict(lambda: [0, 0])
    for r in rows:
        if r.calculation_date >= cutoff:
            bucket = monthly[r.calculation_date.strftime("%Y-%m")]
            bucket[0] += r.total_emissions
            bucket[1] += 1
    trend = [
        {"month": m, "avg_emissions": round_half_up(total / count), "calculation_count": count}
        for m, (total, count) in sorted(monthly.items())
    ]

    progress = None
    if n >= 2:
        first, latest = rows[0], rows[-1]
        progress = {
            "first_calculation_date": first.calculation_date.isoformat(),
            "latest_calculation_date": latest.calculation_date.isoformat(),
            "first_emissions": first.total_emissions,
            "latest_emissions": latest.total_emissions,
            "reduction_percentage": ((first.total_emissions - latest.total_emissions)
                                     / first.total_emissions * 100) if first.total_emissions > 0 else 0,
        }

    stats = {"total_calculations": n, "avg_total_emissions": round_half_up(avg_total)}
    stats.update({f"avg_{f}": round_half_up(v) for f, v in avgs.items()})
    stats["monthly_trend"] = trend
    stats["category_breakdown"] = breakdown
    stats["reduction_progress"] = progress
    stats["comparison_metrics"] = _comparisons(avg_total)
    return stats
