# ecozync/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
import os

from .config import settings

SQLALCHEMY_DATABASE_URL = settings.database_url

_url = make_url(SQLALCHEMY_DATABASE_URL)
connect_args = {}
if _url.get_backend_name() == "sqlite":
    connect_args = {"check_same_thread": False}
    if _url.database and _url.database != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(_url.database)), exist_ok=True)

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
