# authentication.py
"""Verificação de credenciais (login/senha) contra a tabela de usuários.

Uma única consulta parametrizada decide o resultado: existe uma linha com o
login e a senha informados? As senhas são comparadas em texto puro pelo banco;
não há hash aqui (ver DESIGN.md).
"""
from contextlib import closing
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type

from db_config import DbConfig


class StorageError(Exception):
    """Falha ao falar com o banco. A exceção do driver fica em __cause__."""


class DriverUnavailable(StorageError):
    """pyodbc ou o driver ODBC configurado não está instalado."""


class QueryExecutionFailure(StorageError):
    """Erro de conexão ou de execução da consulta."""


@dataclass(frozen=True)
class VerificationResult:
    success: bool
    display_name: str = ""

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        # permite `ok, nome = verifier.verify(...)`
        yield self.success
        yield self.display_name


NOT_AUTHENTICATED = VerificationResult(False, "")


def _sqlstate(exc: Exception) -> str:
    args = getattr(exc, "args", ())
    if args and isinstance(args[0], str):
        return args[0]
    return ""


def _pyodbc_errors() -> Tuple[Type[Exception], ...]:
    try:
        import pyodbc
    except ImportError as exc:
        raise DriverUnavailable("Driver pyodbc não encontrado.") from exc
    return (pyodbc.Error,)


def get_db_connection(config: DbConfig):
    """
    Retorna uma conexão pyodbc para o banco descrito em `config`.
    Levanta DriverUnavailable se o pyodbc/driver ODBC não existir e
    QueryExecutionFailure para qualquer outra falha de conexão.
    """
    try:
        import pyodbc
    except ImportError as exc:
        raise DriverUnavailable("Driver pyodbc não encontrado.") from exc

    # Log de diagnóstico (não inclui credenciais)
    print(f"[DEBUG] Abrindo conexão ODBC -> {config.describe()}")
    try:
        return pyodbc.connect(config.connection_string(), autocommit=False)
    except pyodbc.Error as exc:
        # IM002: "Data source name not found and no default driver specified"
        if _sqlstate(exc) == "IM002":
            raise DriverUnavailable(f"Driver ODBC não encontrado: {config.driver}") from exc
        raise QueryExecutionFailure(f"Não foi possível conectar em {config.server}.{config.database}") from exc


class CredentialVerifier:
    """Checks login/password pairs against the configured credentials table.

    `connect` receives the config and returns a DB-API connection whose driver
    uses the qmark (`?`) paramstyle; `db_errors` lists the driver exceptions
    that become QueryExecutionFailure. Both default to pyodbc. Instances keep
    no per-call state and can be shared between threads.
    """

    def __init__(
        self,
        config: DbConfig,
        connect: Optional[Callable[[DbConfig], object]] = None,
        db_errors: Optional[Tuple[Type[Exception], ...]] = None,
    ):
        self.config = config
        self._connect = connect or get_db_connection
        self._db_errors = db_errors

    @property
    def query(self) -> str:
        cfg = self.config
        return (
            f"SELECT {cfg.name_column} FROM {cfg.table} "
            f"WHERE {cfg.login_column} = ? AND {cfg.password_column} = ?"
        )

    def verify(self, login: str, password: str) -> VerificationResult:
        db_errors = self._db_errors or _pyodbc_errors()
        print(f"[AUTH] Tentando autenticar usuário: {login}")
        try:
            with closing(self._connect(self.config)) as conn:
                with closing(conn.cursor()) as cur:
                    cur.execute(self.query, (login, password))
                    row = cur.fetchone()
        except db_errors as exc:
            raise QueryExecutionFailure("Erro ao verificar o usuário no banco de dados.") from exc

        if row is None:
            print(f"[AUTH] Login ou senha inválidos para: {login}")
            return NOT_AUTHENTICATED

        nome = str(row[0]) if row[0] is not None else ""
        print(f"[AUTH] Autenticação bem-sucedida para: {login}")
        return VerificationResult(True, nome)


def verify_user(login: str, password: str, config: Optional[DbConfig] = None) -> VerificationResult:
    """Atalho: verifica as credenciais usando `config` ou as variáveis DB_*."""
    return CredentialVerifier(config or DbConfig.from_env()).verify(login, password)
