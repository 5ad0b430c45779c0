"""Shared fixtures: an isolated database per test and the two reference surveys."""

import os

# keep the app's own engine off the repository's data directory
os.environ.setdefault("ECOZYNC_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ecozync import storage
from ecozync.database import Base
from ecozync.main import app, get_db
from ecozync.schemas import SurveyResponse


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def cache_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "DATA_DIR", tmp_path)
    return tmp_path


@pytest.fixture
def low_impact_answers():
    return {
        "heating_type": "renewable",
        "monthly_energy_bill": 100,
        "primary_transport": "bike_walk",
        "weekly_km": 0,
        "short_flights": 0,
        "medium_flights": 0,
        "long_flights": 0,
        "diet_type": "vegan",
        "shopping_frequency": "rarely",
        "waste_management": "compost_too",
    }


@pytest.fixture
def high_impact_answers():
    return {
        "heating_type": "oil",
        "monthly_energy_bill": 250,
        "primary_transport": "car_alone",
        "fuel_type": "gasoline",
        "weekly_km": 400,
        "short_flights": 3,
        "medium_flights": 3,
        "long_flights": 2,
        "diet_type": "omnivore",
        "shopping_frequency": "monthly",
        "waste_management": "everything_trash",
    }


@pytest.fixture
def low_impact(low_impact_answers):
    return SurveyResponse(**low_impact_answers)


@pytest.fixture
def high_impact(high_impact_answers):
    return SurveyResponse(**high_impact_answers)
