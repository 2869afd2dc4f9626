"""Engine and schema helpers"""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from blockpress.crud.models import Article  # noqa: F401  registers the table on SQLModel.metadata


def make_engine(db_url: str) -> Engine:
    return create_engine(db_url, echo=False)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
