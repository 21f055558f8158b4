from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session
from cartql.core.config import settings

def build_engine(database_url: str = settings.DATABASE_URL, echo: bool = settings.SQL_ECHO) -> Engine:
    # check_same_thread is needed for SQLite, remove for PostgreSQL
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=echo, connect_args=connect_args)

engine = build_engine()

def get_session():
    """One session per request; closed when the request finishes"""
    with Session(engine) as session:
        yield session

def create_db_and_tables(bind: Engine = engine):
    SQLModel.metadata.create_all(bind)
