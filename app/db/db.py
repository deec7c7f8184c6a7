import os
import logging
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./warranty.db")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,

    pool_pre_ping=True,

    echo=os.getenv("SQL_ECHO", "false").lower() == "true" # Set SQL_ECHO=true for SQL query logging
)


def create_db_and_tables():
    # Models must be imported so their tables are registered on the metadata
    from app.models import admin, product, warranty_claim, warranty_record  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables checked/created")


def get_session():
    with Session(engine) as session:
        yield session
