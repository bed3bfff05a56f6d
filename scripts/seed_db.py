from __future__ import annotations

import importlib

from timekeeping.config import get_settings_module
from timekeeping.database.bootstrap import ensure_demo_data
from timekeeping.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)
    print(f"OK: Seeded demo actor and projects -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
