"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from typing import Optional
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    # Naive UTC, which is what DateTime columns hand back
    return datetime.now(UTC).replace(tzinfo=None)


class Book(Base):
    """Ledger (tenant) model."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="book", cascade="all, delete-orphan")
    categories = relationship("Category", back_populates="book", cascade="all, delete-orphan")


class Account(Base):
    """Account model. ``balance`` is in minor currency units."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    balance = Column(Integer, default=0, nullable=False)
    bank_name = Column(String, nullable=True)
    account_number = Column(String, nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("book_id", "name", name="uq_account_book_name"),
        CheckConstraint("kind IN ('ASSET', 'LIABILITY', 'EQUITY')", name="ck_account_kind"),
    )

    # Relationships
    book = relationship("Book", back_populates="accounts")


class Category(Base):
    """Category model with hierarchical structure."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category_type = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (
        CheckConstraint("category_type IN ('INCOME', 'EXPENSE')", name="ck_category_type"),
    )

    # Relationships
    book = relationship("Book", back_populates="categories")
    parent = relationship("Category", remote_side=[id], backref="children")


class Transaction(Base):
    """Transaction header model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    transaction_type = Column(String, nullable=False)
    description = Column(String, nullable=False)
    transaction_date = Column(Date, nullable=False)
    counterparty = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    # JSON array, decoded by the mappers
    tags = Column(Text, default="[]", nullable=False)
    created_by = Column(String, nullable=False)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "transaction_type IN ('INCOME', 'EXPENSE', 'TRANSFER')", name="ck_transaction_type"
        ),
    )

    # Relationships
    splits = relationship(
        "TransactionSplit",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionSplit.position",
        passive_deletes=True,
    )


class TransactionSplit(Base):
    """One signed leg of a transaction."""

    __tablename__ = "transaction_splits"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(
        Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    amount = Column(Integer, nullable=False)
    direction = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (
        CheckConstraint("direction IN ('DEBIT', 'CREDIT')", name="ck_split_direction"),
    )

    # Relationships
    transaction = relationship("Transaction", back_populates="splits")


# Execution option marking a connection that will write
WRITE_OPTION = "ledger_write"


def _install_sqlite_pragmas(engine: Engine) -> None:
    """Enforce foreign keys and take the write lock when a write begins.

    Connections marked with the ``WRITE_OPTION`` execution option start with
    BEGIN IMMEDIATE. Everything else starts a deferred transaction so reads
    are not queued behind an open ledger unit.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def create_engine_for_url(database_url: str, isolation_level: Optional[str] = None) -> Engine:
    """Create a SQLAlchemy engine configured for ledger writes."""
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, echo=False)
        _install_sqlite_pragmas(engine)
        return engine

    options = {"pool_pre_ping": True}
    if isolation_level:
        options["isolation_level"] = isolation_level
    return create_engine(database_url, echo=False, **options)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    return sessionmaker(bind=engine, expire_on_commit=False)
