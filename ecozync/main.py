# ecozync/main.py
"""Ecozync API: survey calculation, per-user history and stats."""
import logging
import math
from datetime import date
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .config import settings
from .database import engine, Base, SessionLocal
from . import models, crud, schemas, calculator, survey
from .factors import DATA_SOURCES, factor_table_as_dict

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create DB tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Ecozync Carbon Footprint API", version="0.1.0")
app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_methods=["*"], allow_headers=["*"])

CALCULATION_FAILED = "Failed to calculate your carbon footprint. Please try again."

# Dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def require_user(token: str, db: Session = Depends(get_db)) -> models.User:
    user = crud.get_user_by_token(db, token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user

def optional_user(token: Optional[str] = None, db: Session = Depends(get_db)) -> Optional[models.User]:
    return crud.get_user_by_token(db, token) if token else None

def _token_out(user):
    return {"token": user.token, "user_id": user.id, "first_name": user.first_name,
            "last_name": user.last_name, "email": user.email}

def _run_calculation(answers: schemas.SurveyResponse) -> schemas.EmissionBreakdown:
    try:
        return calculator.calculate_emissions(answers)
    except calculator.CalculationError:
        raise HTTPException(status_code=500, detail=CALCULATION_FAILED)

def _result(breakdown, saved=False, calculation_id=None):
    return {
        "results": breakdown,
        "impact": calculator.impact_level(breakdown.total_emissions),
        "comparisons": calculator.comparison_metrics(breakdown.total_emissions),
        "saved": saved,
        "calculation_id": calculation_id,
    }

def _json_safe(value):
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # rejected Infinity/NaN inputs are echoed back as strings
    return JSONResponse(status_code=422, content={"detail": _json_safe(jsonable_encoder(exc.errors()))})

@app.get("/health")
def health():
    return {"status": "ok"}

# -----------------
# Auth endpoints
# -----------------
@app.post("/signup", response_model=schemas.TokenOut)
def signup(payload: schemas.SignupIn, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    user = crud.create_user(db, payload.first_name, payload.last_name, payload.email, payload.password)
    return _token_out(user)

@app.post("/login", response_model=schemas.TokenOut)
def login(payload: schemas.LoginIn, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _token_out(user)

# -----------------
# Survey & calculation
# -----------------
@app.get("/survey/questions")
def survey_questions():
    return survey.QUESTIONS

@app.get("/factors")
def emission_factors():
    return {"factors": factor_table_as_dict(), "sources": dict(DATA_SOURCES)}

@app.post("/calculate", response_model=schemas.CalculationResult)
def calculate(answers: schemas.SurveyResponse):
    return _result(_run_calculation(answers))

@app.post("/assessments", response_model=schemas.CalculationResult)
def submit_assessment(assessment: schemas.AssessmentData,
                      user: Optional[models.User] = Depends(optional_user),
                      db: Session = Depends(get_db)):
    """Convert the survey answers, calculate, and save today's result for signed-in users."""
    breakdown = _run_calculation(survey.convert_assessment_to_responses(assessment))
    if user is None:
        return _result(breakdown)
    values = breakdown.model_dump(exclude={"total_emissions", "confidence_score"})
    values["calculation_confidence"] = breakdown.confidence_score
    values["assessment_data"] = assessment.model_dump()
    try:
        calc, _ = crud.upsert_calculation(db, user.id, date.today(), values)
    except SQLAlchemyError:
        # results are still shown when the save fails
        db.rollback()
        logger.exception("Failed to save calculation for %s", user.id)
        return _result(breakdown)
    return _result(breakdown, saved=True, calculation_id=calc.id)

# -----------------
# Saved calculations
# -----------------
@app.get("/calculations", response_model=schemas.CalculationPage)
def list_calculations(page: int = 1, page_size: int = 20,
                      start_date: Optional[date] = None, end_date: Optional[date] = None,
                      min_emissions: Optional[float] = None, max_emissions: Optional[float] = None,
                      user: models.User = Depends(require_user), db: Session = Depends(get_db)):
    rows, count, page, page_size = crud.list_calculations(
        db, user.id, page=page, page_size=page_size, start_date=start_date, end_date=end_date,
        min_emissions=min_emissions, max_emissions=max_emissions)
    total_pages = -(-count // page_size)
    return {
        "data": rows,
        "count": count,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1,
    }

@app.post("/calculations", response_model=schemas.CalculationOut, status_code=201)
def save_calculation(payload: schemas.CalculationIn, response: Response,
                     user: models.User = Depends(require_user), db: Session = Depends(get_db)):
    values = payload.model_dump()
    try:
        calc, created = crud.upsert_calculation(db, user.id, payload.calculation_date, values)
    except IntegrityError:
        # another request saved this day first; update its row instead
        db.rollback()
        calc, created = crud.upsert_calculation(db, user.id, payload.calculation_date, values)
    if not created:
        response.status_code = 200
    return calc

@app.get("/calculations/stats")
def calculation_stats(months: int = 12, user: models.User = Depends(require_user),
                      db: Session = Depends(get_db)):
    return crud.calculation_stats(db, user.id, months=months)

def _owned_calculation(calculation_id: str, user: models.User = Depends(require_user),
                       db: Session = Depends(get_db)) -> models.Calculation:
    calc = crud.get_calculation(db, user.id, calculation_id)
    if not calc:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return calc

@app.get("/calculations/{calculation_id}", response_model=schemas.CalculationOut)
def get_calculation(calc: models.Calculation = Depends(_owned_calculation)):
    return calc

@app.put("/calculations/{calculation_id}", response_model=schemas.CalculationOut)
def update_calculation(payload: schemas.CalculationUpdate,
                       calc: models.Calculation = Depends(_owned_calculation),
                       db: Session = Depends(get_db)):
    try:
        return crud.update_calculation(db, calc, payload.model_dump(exclude_none=True))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="A calculation already exists for that date")

@app.delete("/calculations/{calculation_id}")
def delete_calculation(calc: models.Calculation = Depends(_owned_calculation),
                       db: Session = Depends(get_db)):
    crud.delete_calculation(db, calc)
    return {"message": "Calculation deleted successfully"}
