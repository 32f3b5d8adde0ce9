"""Tests for the database engine/session service."""

from sqlalchemy import StaticPool

from src.lending.core.services import DbManageService, DbSessionService, LendingService
from src.lending.entities.book import BookDraft
from src.lending.runtime.config.config_data import DatabaseConfig


class TestDbSessionService:
    def test_health_check(self, database_service: DbSessionService):
        assert database_service.health_check() is True

    def test_pool_status_reports_counters(self, database_service: DbSessionService):
        status = database_service.get_pool_status()

        assert set(status) == {"size", "checked_in", "checked_out", "overflow"}
        assert status["size"] == 10

    def test_in_memory_sqlite_shares_one_database(self, draft: BookDraft):
        service = DbSessionService(DatabaseConfig(url="sqlite://", environment_mode="test"))
        try:
            assert isinstance(service.engine.pool, StaticPool)
            DbManageService(service.engine).create_all()

            writer = service.get_session()
            book = LendingService(writer).create(draft)
            writer.close()

            reader = service.get_session()
            assert LendingService(reader).get_by_id(book.id).title == draft.title
            reader.close()
        finally:
            service.dispose()

    def test_health_check_fails_after_bad_url(self, tmp_path):
        service = DbSessionService(
            DatabaseConfig(
                url=f"sqlite:///{tmp_path / 'missing' / 'nested' / 'books.db'}",
                environment_mode="test",
            )
        )
        try:
            assert service.health_check() is False
        finally:
            service.dispose()
