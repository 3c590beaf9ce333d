"""
SQLite-backed rule store.

Rules live in the ``security_rules`` table, keyed by an auto-assigned integer id
with a uniqueness constraint on ``name``. Each operation runs in its own short
session; SQLAlchemy errors surface as the store errors from ``core.errors``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError
from sqlalchemy import Boolean, DateTime, Integer, String, Text, create_engine, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from kubesnoop.core.errors import DuplicateRuleError, RuleNotFoundError, RuleStoreUnavailableError
from kubesnoop.rules.interface import RuleStore, normalize_rule_type
from kubesnoop.rules.models import RuleType, SecurityRule

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class SecurityRuleRow(Base):
    """Persisted security rule."""

    __tablename__ = "security_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    severity: Mapped[str] = mapped_column(String(16), nullable=False, index=True)  # HIGH, MEDIUM, LOW
    description: Mapped[str] = mapped_column(Text, nullable=False)
    remediation: Mapped[str] = mapped_column(Text, nullable=False)
    rule_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)  # pod, service, rbac, ...
    query: Mapped[str] = mapped_column(Text, nullable=False)
    condition: Mapped[str] = mapped_column(Text, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)  # comma-separated
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_rule(self) -> SecurityRule:
        try:
            return SecurityRule(
                id=self.id,
                name=self.name,
                category=self.category,
                severity=self.severity,
                description=self.description,
                remediation=self.remediation,
                rule_type=self.rule_type,
                query=self.query,
                condition=self.condition,
                enabled=self.enabled,
                tags=self.tags or "",
            )
        except ValidationError as e:
            raise RuleStoreUnavailableError(f"Stored rule {self.id} is invalid: {e}") from e

    def apply(self, rule: SecurityRule) -> None:
        self.name = rule.name
        self.category = rule.category
        self.severity = rule.severity.value
        self.description = rule.description
        self.remediation = rule.remediation
        self.rule_type = rule.rule_type
        self.query = rule.query
        self.condition = rule.condition
        self.enabled = rule.enabled
        self.tags = rule.tags


class SQLiteRuleStore(RuleStore):
    """
    Rule store on an embedded SQLite database.

    Example:
        store = SQLiteRuleStore("sqlite:///kubesnoop.db")
        store.seed_defaults()
        pod_rules = store.get_enabled_rules("pod")
    """

    def __init__(self, database_url: str = "sqlite:///kubesnoop.db"):
        engine_kwargs: dict = {}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, or every session would see its own empty database
            engine_kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}

        try:
            self._engine = create_engine(database_url, **engine_kwargs)
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise RuleStoreUnavailableError(f"Cannot open rule database {database_url}: {e}") from e

        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)
        logger.info("rule_store_opened", database_url=database_url)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._sessions()
        try:
            yield session
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            raise RuleStoreUnavailableError(f"Rule store query failed: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_enabled_rules(self, rule_type: RuleType | str | None = None) -> list[SecurityRule]:
        return self.get_rules(rule_type, include_disabled=False)

    def get_rules(self, rule_type: RuleType | str | None = None, include_disabled: bool = True) -> list[SecurityRule]:
        statement = select(SecurityRuleRow).order_by(SecurityRuleRow.id)
        if not include_disabled:
            statement = statement.where(SecurityRuleRow.enabled.is_(True))
        wanted = normalize_rule_type(rule_type)
        if wanted is not None:
            statement = statement.where(SecurityRuleRow.rule_type == wanted)

        with self._session() as session:
            return [row.to_rule() for row in session.scalars(statement)]

    def get_rule(self, rule_id: int) -> SecurityRule:
        with self._session() as session:
            return self._get_row(session, rule_id).to_rule()

    def get_rule_by_name(self, name: str) -> SecurityRule | None:
        with self._session() as session:
            row = session.scalars(select(SecurityRuleRow).where(SecurityRuleRow.name == name)).first()
            return row.to_rule() if row is not None else None

    def add(self, rule: SecurityRule) -> SecurityRule:
        row = SecurityRuleRow()
        row.apply(rule)
        try:
            with self._session() as session:
                session.add(row)
                session.flush()
                stored = row.to_rule()
        except IntegrityError as e:
            raise DuplicateRuleError(rule.name) from e
        logger.debug("rule_added", rule=stored.name, rule_id=stored.id)
        return stored

    def update(self, rule_id: int, rule: SecurityRule) -> SecurityRule:
        try:
            with self._session() as session:
                row = self._get_row(session, rule_id)
                row.apply(rule)
                session.flush()
                stored = row.to_rule()
        except IntegrityError as e:
            raise DuplicateRuleError(rule.name) from e
        return stored

    def delete(self, rule_id: int) -> None:
        with self._session() as session:
            session.delete(self._get_row(session, rule_id))

    def set_enabled(self, rule_id: int, enabled: bool) -> SecurityRule:
        with self._session() as session:
            row = self._get_row(session, rule_id)
            row.enabled = enabled
            session.flush()
            return row.to_rule()

    def count(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(SecurityRuleRow)) or 0

    def close(self) -> None:
        self._engine.dispose()

    @staticmethod
    def _get_row(session: Session, rule_id: int) -> SecurityRuleRow:
        row = session.get(SecurityRuleRow, rule_id)
        if row is None:
            raise RuleNotFoundError(rule_id)
        return row
