from pathlib import Path
import uuid

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from kmzpoints.db_models import Base
from kmzpoints.errors import PersistenceError


def create_database_file(output_dir: str | Path) -> Path:
    """Create an empty ``<uuid>.db`` file in ``output_dir`` and return its path."""
    directory = Path(output_dir)
    path = directory / f"{uuid.uuid4()}.db"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=False)
    except OSError as exc:
        raise PersistenceError(f"cannot create database file {path}: {exc}") from exc
    return path


def sqlite_url(path: str | Path) -> str:
    return f"sqlite:///{Path(path)}"


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, future=True)


def create_schema(engine: Engine) -> None:
    # create_all skips tables that already exist.
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise PersistenceError(f"cannot create schema: {exc}") from exc


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
