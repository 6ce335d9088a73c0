"""Schema and demo-data bootstrap used by ``scripts/`` and ``AUTO_INIT_DB``.

These helpers open their own connections outside the container, so they run
before the database exists.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

# (email, full name, password, role, company name for client accounts)
DEMO_ACCOUNTS = (
    ("admin@portal.local", "Avery Admin", "admin123", "admin", None),
    ("hr@portal.local", "Harper Reyes", "hr1234", "hr", None),
    ("team@portal.local", "Taylor Nguyen", "team123", "team", None),
    ("team2@portal.local", "Morgan Lee", "team123", "team", None),
    ("client@portal.local", "Casey Client", "client123", "client", "Acme Corp"),
)


def _connect(db_config: dict, *, database: bool = True):
    return DatabaseConnection(DBConfig.from_settings(db_config)).connect(database=database)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, never from the file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside of quoted strings."""

    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: Union[str, Path]) -> int:
    sql = _strip_line_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))

    conn = _connect(db_config)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_settings(db_config).database
    conn = _connect(db_config, database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("applied %s (%d statements)", Path(schema_path).name, count)


def apply_seed_sql(db_config: dict, *, seed_path: Union[str, Path]) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("applied %s (%d statements)", Path(seed_path).name, count)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert one completed profile per role with a known password."""

    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)

        def company_id_for(name: str) -> int:
            cur.execute("SELECT company_id FROM client_companies WHERE name=%s", (name,))
            row = cur.fetchone()
            if row:
                return int(row["company_id"])
            cur.execute("INSERT INTO client_companies(name, is_active) VALUES(%s, 1)", (name,))
            return int(cur.lastrowid)

        for email, full_name, password, role, company in DEMO_ACCOUNTS:
            company_id = company_id_for(company) if company else None
            password_hash = generate_password_hash(password)

            cur.execute("SELECT profile_id FROM profiles WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE profiles
                    SET full_name=%s, password_hash=%s, role=%s, client_company_id=%s,
                        is_active=1, profile_completed=1
                    WHERE email=%s
                    """,
                    (full_name, password_hash, role, company_id, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO profiles(email, full_name, password_hash, role, client_company_id, is_active, profile_completed)
                    VALUES(%s,%s,%s,%s,%s,1,1)
                    """,
                    (email, full_name, password_hash, role, company_id),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
