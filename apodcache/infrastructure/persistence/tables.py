"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    func,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# DAILY RECORDS TABLE (one row per calendar date)
# ============================================================================
daily_records_table = Table(
    "daily_records",
    metadata,
    Column("date", String(10), primary_key=True),  # YYYY-MM-DD
    Column("title", String(200), nullable=False),
    Column("explanation", Text, nullable=False),
    Column("media_type", String(16), nullable=False),  # MediaType as string
    Column("url", Text, nullable=False),
    Column("hd_url", Text, nullable=True),
    Column("copyright", String(200), nullable=True),
    Column("service_version", String(32), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    CheckConstraint("media_type IN ('image', 'video')", name="ck_daily_records_media_type"),
)

Index("idx_daily_records_date_desc", daily_records_table.c.date.desc())

# Full-text index for search; PostgreSQL only, SQLite falls back to LIKE scans
Index(
    "idx_daily_records_text",
    func.to_tsvector(
        "english",
        daily_records_table.c.title + " " + daily_records_table.c.explanation,
    ),
    postgresql_using="gin",
).ddl_if(dialect="postgresql")
