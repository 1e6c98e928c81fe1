from staffdesk.database import normalize_database_url


def test_sqlite_passes_through():
    assert normalize_database_url("sqlite:///./dev.db") == ("sqlite:///./dev.db", {"check_same_thread": False})


def test_postgres_scheme_pinned_to_psycopg2():
    url, args = normalize_database_url("postgres://u:p@db:5432/staffdesk")
    assert url == "postgresql+psycopg2://u:p@db:5432/staffdesk"
    assert args == {}


def test_ssl_params_move_to_connect_args():
    url, args = normalize_database_url(
        "postgresql+asyncpg://u:p@db/staffdesk?sslmode=require&ssl=true&application_name=api"
    )
    assert url == "postgresql+psycopg2://u:p@db/staffdesk?application_name=api"
    assert args == {"sslmode": "require"}
