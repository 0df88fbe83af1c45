#!/usr/bin/env python
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from mapa.core.config import settings
from mapa.core.logging import configure_logging
from mapa.storage.database import init_db, make_engine, make_session_factory
from mapa.storage.repository import SqlRepository
from mapa.storage.seed import seed_reference_data


def main() -> None:
    configure_logging()
    engine = make_engine(settings.database_url)
    init_db(engine)
    seed_reference_data(SqlRepository(make_session_factory(engine)))


if __name__ == "__main__":
    main()
