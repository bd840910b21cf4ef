"""Local database connection and initialization."""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from familyhome.config import Settings

# Import all models so SQLModel registers them
import familyhome.models  # noqa: F401


def create_db_engine(settings: Settings) -> Engine:
    return create_engine(
        f"sqlite:///{settings.db_path}",
        echo=settings.debug,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    """Create all tables and enable WAL mode."""
    SQLModel.metadata.create_all(engine)

    with engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA journal_mode=WAL")
        conn.exec_driver_sql("PRAGMA synchronous=NORMAL")
        conn.commit()
