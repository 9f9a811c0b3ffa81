from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from kvcache.config import DATABASE_URL
import os

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# creating the SQLAlchemy engine shared by the database cache backend
engine = create_engine(DATABASE_URL, echo=SQL_ECHO, future=True, pool_pre_ping=True)

# Base class for ORM models
Base = declarative_base()
