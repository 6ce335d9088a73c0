from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, db_config: Mapping[str, object]) -> "DBConfig":
        """Build from a settings module's ``DB_CONFIG`` dict."""

        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "project_portal")),
        )

    def describe(self) -> str:
        # safe for logs, no password
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Hands out a fresh connection per repository call.

    Connections use FOUND_ROWS so ``cursor.rowcount`` is the number of matched
    rows; the conditional status updates rely on it.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, database: bool = True):
        kwargs = dict(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            client_flags=[ClientFlag.FOUND_ROWS],
        )
        if database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
