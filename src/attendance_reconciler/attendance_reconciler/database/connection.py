from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import ClassVar

import mysql.connector

# Session time zone for CURRENT_TIMESTAMP columns; matches LOCAL_TZ.
SESSION_TIME_ZONE = "-03:00"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "ponto_db")),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )


class DatabaseConnection:
    """Connection factory shared by the MySQL repositories.

    One instance per DBConfig.  Each repository call opens a short-lived
    connection (see ``db_cursor``), so the ingestor worker threads never share
    a connection.
    """

    _instances: ClassVar[dict[DBConfig, "DatabaseConnection"]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._lock:
            if config not in cls._instances:
                cls._instances[config] = cls(config)
            return cls._instances[config]

    def connect(self):
        c = self._config
        conn = mysql.connector.connect(
            host=c.host,
            port=c.port,
            user=c.user,
            password=c.password,
            database=c.database,
            charset="utf8mb4",
            connection_timeout=c.connect_timeout,
            autocommit=False,
        )
        cur = conn.cursor()
        try:
            cur.execute("SET time_zone = %s", (SESSION_TIME_ZONE,))
        finally:
            cur.close()
        return conn
