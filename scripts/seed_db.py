from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "project_portal"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from project_portal.database.bootstrap import DEMO_ACCOUNTS, apply_seed_sql, ensure_demo_users
from project_portal.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_users(db_config)

    print(f"demo data loaded into {DBConfig.from_settings(db_config).describe()}")
    for email, _, password, role, _ in DEMO_ACCOUNTS:
        print(f"  {role:<6} {email} / {password}")


if __name__ == "__main__":
    main()
