# db_config.py
import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

# Ajuste o DRIVER se necessário. Ex.: 'ODBC Driver 18 for SQL Server'
DEFAULT_ODBC_DRIVER = "ODBC Driver 17 for SQL Server"
DEFAULT_SERVER = "localhost"
DEFAULT_DATABASE = "connectiondb"

# identificador simples, opcionalmente qualificado por schema (ex.: dbo.usuarios)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_TRUE_VALUES = {"1", "true", "yes", "sim", "on"}


def _quote_odbc_value(value: str) -> str:
    """Brace-quote an ODBC connection string value when it carries separators."""
    if any(ch in value for ch in ";{}") or value != value.strip():
        return "{" + value.replace("}", "}}") + "}"
    return value


@dataclass(frozen=True)
class DbConfig:
    """Connection target and credentials table layout for the backing store.

    Table and column names end up inside the SQL text (only the login and
    password values are bound), so they are validated as identifiers here.
    """

    server: str = DEFAULT_SERVER
    database: str = DEFAULT_DATABASE
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    driver: str = DEFAULT_ODBC_DRIVER
    trusted_connection: bool = False
    table: str = "usuarios"
    login_column: str = "login"
    password_column: str = "senha"
    name_column: str = "nome"

    def __post_init__(self):
        for attr in ("table", "login_column", "password_column", "name_column"):
            value = getattr(self, attr)
            if not isinstance(value, str) or not _IDENTIFIER_RE.match(value):
                raise ValueError(f"Identificador SQL inválido para {attr}: {value!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DbConfig":
        """Build a config from DB_* environment variables.

        DB_USER and DB_PASSWORD hold the storage credentials; a missing one is
        kept as None and the store will refuse the connection.
        """
        env = os.environ if environ is None else environ
        trusted = env.get("DB_TRUSTED_CONNECTION", "").strip().lower() in _TRUE_VALUES
        return cls(
            server=env.get("DB_SERVER", DEFAULT_SERVER),
            database=env.get("DB_NAME", DEFAULT_DATABASE),
            user=env.get("DB_USER"),
            password=env.get("DB_PASSWORD"),
            driver=env.get("DB_ODBC_DRIVER", DEFAULT_ODBC_DRIVER),
            trusted_connection=trusted,
            table=env.get("DB_USERS_TABLE", "usuarios"),
        )

    def connection_string(self) -> str:
        conn_str = ("DRIVER={%s};" "SERVER=%s;" "DATABASE=%s;") % (
            self.driver,
            _quote_odbc_value(self.server),
            _quote_odbc_value(self.database),
        )
        if self.trusted_connection:
            return conn_str + "Trusted_Connection=yes;"
        return conn_str + "UID=%s;PWD=%s;" % (
            _quote_odbc_value(self.user or ""),
            _quote_odbc_value(self.password or ""),
        )

    def describe(self) -> str:
        """Connection target without credentials, for diagnostic output."""
        return f"DRIVER={self.driver}; SERVER={self.server}; DATABASE={self.database}"
