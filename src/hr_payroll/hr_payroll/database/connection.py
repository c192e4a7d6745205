from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from mysql.connector import errors, pooling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "hr_payroll")),
        )


class DatabaseConnection:
    """Connection factory backed by a mysql-connector pool.

    The pool is created on first use and sized so every fan-out worker can hold
    one connection. Closing a connection returns it to the pool. When every pooled
    connection is checked out, `connect()` waits up to `pool_timeout` seconds for
    one to come back before giving up.
    """

    RETRY_INTERVAL = 0.05

    def __init__(
        self,
        config: DBConfig,
        *,
        pool_size: int = 5,
        pool_name: str = "hr_payroll",
        pool_timeout: float = 5.0,
    ):
        self._config = config
        self._pool_size = max(1, min(int(pool_size), 32))
        self._pool_name = pool_name
        self._pool_timeout = max(0.0, float(pool_timeout))
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._lock = threading.Lock()

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=self._pool_name,
                    pool_size=self._pool_size,
                    host=self._config.host,
                    port=self._config.port,
                    user=self._config.user,
                    password=self._config.password,
                    database=self._config.database,
                )
            return self._pool

    def connect(self):
        pool = self._get_pool()
        deadline = time.monotonic() + self._pool_timeout
        while True:
            try:
                return pool.get_connection()
            except errors.PoolError:
                # Raised straight away when the pool is exhausted.
                if time.monotonic() >= deadline:
                    logger.warning(
                        "No pooled connection freed up within %.1fs (pool size %s)",
                        self._pool_timeout,
                        self._pool_size,
                    )
                    raise
                time.sleep(self.RETRY_INTERVAL)
