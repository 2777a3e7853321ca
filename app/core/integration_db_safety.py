from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import URL, make_url

LOCAL_TEST_HOSTS = frozenset(
    {
        "localhost",
        "127.0.0.1",
        "::1",
        "postgres",
        "campaign_console_postgres",
    }
)
TEST_DB_MARKER = "test"


@dataclass(frozen=True, slots=True)
class IntegrationDbTarget:
    database_name: str
    host: str
    backend: str
    problem: str | None = None

    @property
    def is_safe(self) -> bool:
        return self.problem is None


def _find_problem(url: URL, *, database_name: str, host: str) -> str | None:
    if url.get_backend_name() != "postgresql":
        return "integration tests run only against PostgreSQL"
    if not database_name:
        return "database name is empty"
    if TEST_DB_MARKER not in database_name.lower():
        return f"database name must contain '{TEST_DB_MARKER}'"
    if host not in LOCAL_TEST_HOSTS:
        return f"host '{host}' is not a local test host"
    return None


def inspect_integration_db(database_url: str) -> IntegrationDbTarget:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()
    return IntegrationDbTarget(
        database_name=database_name,
        host=host,
        backend=url.get_backend_name(),
        problem=_find_problem(url, database_name=database_name, host=host),
    )


def assert_safe_integration_db(database_url: str) -> None:
    """Integration fixtures TRUNCATE every table; refuse anything but a local test DB."""
    target = inspect_integration_db(database_url)
    if target.is_safe:
        return
    raise RuntimeError(
        f"Refusing to TRUNCATE {target.backend} database '{target.database_name}' "
        f"on '{target.host}': {target.problem}. "
        "Point DATABASE_URL at a local test database such as 'campaign_console_test'."
    )
