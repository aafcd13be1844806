import sys

# Configura o encoding para UTF-8 no Windows
if sys.platform.startswith("win"):
    import io

    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")

from contextlib import closing

from authentication import StorageError, get_db_connection
from db_config import DbConfig


def check_credentials_table(config=None, connect=None, db_errors=(Exception,)):
    """
    Testa a conexão com o banco e confirma que a tabela de credenciais
    expõe as colunas de login, senha e nome. Retorna True/False; não levanta
    exceção para falhas de banco.
    """
    config = config or DbConfig.from_env()
    connect = connect or get_db_connection
    cols = [config.login_column, config.password_column, config.name_column]

    print("\n=== Diagnóstico do Banco de Dados ===")
    print(f"Destino: {config.describe()}")
    if not config.trusted_connection and (not config.user or not config.password):
        print("⚠️  DB_USER e/ou DB_PASSWORD não definidos; a conexão provavelmente será recusada.")

    try:
        print("\n🔍 Testando conexão com o banco de dados...")
        with closing(connect(config)) as conn:
            print("✅ Conexão com o banco de dados estabelecida com sucesso!")
            with closing(conn.cursor()) as cur:
                print(f"\n🔍 Verificando tabela {config.table} ({', '.join(cols)})...")
                # WHERE 1 = 0: valida tabela e colunas sem ler nenhuma linha
                cur.execute(f"SELECT {', '.join(cols)} FROM {config.table} WHERE 1 = 0")
                cur.fetchall()
                found = [d[0] for d in cur.description or ()]
    except StorageError as e:
        print(f"\n❌ Erro de conexão: {e} ({e.__cause__})")
        return False
    except db_errors as e:
        print(f"\n❌ Tabela ou colunas inválidas: {e}")
        return False

    print(f"✅ {config.table} - Encontrada, colunas: {found}")
    print("\n✅ Diagnóstico concluído!")
    return True


if __name__ == "__main__":
    sys.exit(0 if check_credentials_table() else 1)
