from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from config import get_settings

# Import registers the table on SQLModel.metadata
import models  # noqa: F401


def build_engine(database_url: str) -> Engine:
    """Create an engine for the record store"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


engine = build_engine(get_settings().database_url)


def create_db_and_tables(bind: Engine = engine) -> None:
    """Create the key/value table if it does not exist yet"""
    SQLModel.metadata.create_all(bind)
