"""
Database initialization and seeding for the Tarefas system.

This script:
1. Creates all database tables if they don't exist
2. Optionally seeds the database with an example task

Usage:
    python -m tarefas.db.init_db [--seed]
"""

import argparse
import logging
from typing import Optional, Sequence

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tarefas.config import settings
from tarefas.db.models import Base, Task
from tarefas.db.session import create_db_engine, create_session_factory


logger = logging.getLogger(__name__)

EXAMPLE_TITLE = "Minha primeira tarefa"


def create_tables(engine: Engine) -> None:
    """Create all database tables."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully.")


def seed_example_task(db: Session) -> bool:
    """
    Seed the database with an example task.

    Returns:
        True if the task was created, False if the table already has rows
    """
    if db.query(Task).first() is not None:
        logger.info("Tasks already present. Skipping seed.")
        return False

    task = Task(titulo=EXAMPLE_TITLE, descricao="Criada pelo init_db")
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Example task created with id %s", task.id)
    return True


def init_db(db_url: str, seed: bool = False) -> None:
    """
    Initialize database: create tables and optionally seed an example task.

    This function is idempotent - safe to run multiple times.
    """
    engine = create_db_engine(db_url)
    try:
        create_tables(engine)
        if seed:
            with create_session_factory(engine)() as db:
                seed_example_task(db)
    finally:
        engine.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Initialize the Tarefas database")
    parser.add_argument("--seed", action="store_true", help="create an example task")
    parser.add_argument("--db-url", default=settings.db_url, help="SQLAlchemy database URL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    init_db(args.db_url, seed=args.seed)


if __name__ == "__main__":
    main()
