"""Prepare the local store before the first session opens."""
from __future__ import annotations

import logging
from typing import Optional

from worldtimez.config.settings import get_settings
from worldtimez.data.database import create_db_engine, init_db
from worldtimez.utils.logging import setup_logging


def prepare(database_url: Optional[str] = None) -> str:
    settings = get_settings()
    url = database_url or settings.database_url
    engine = create_db_engine(url)
    try:
        init_db(engine)
    finally:
        engine.dispose()
    logging.getLogger("worldtimez.prestart").info("Database initialised at %s", url)
    return url


def main() -> None:
    setup_logging(level=get_settings().log_level)
    prepare()


if __name__ == "__main__":
    main()
