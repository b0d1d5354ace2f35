"""SQLAlchemy 2.0 ORM models for the Reachbase template library.

Covers 6 tables in the crm schema:
  templates, template_performance, template_favorites,
  template_snippets, template_collections, template_collection_items

workspace_id / created_by / user_id reference workspaces and users owned
by other services, so they carry no foreign keys here.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    UUID,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Vocabularies used in CHECK constraints
# ---------------------------------------------------------------------------

TEMPLATE_STATUSES = ("draft", "active", "archived")
ACCESS_LEVELS = ("personal", "team", "company")
SNIPPET_TYPES = (
    "intro",
    "value_prop",
    "social_proof",
    "cta",
    "pain_point",
    "closing",
    "custom",
)
COLLECTION_TYPES = ("system", "custom")


def _in_check(column: str, values: tuple[str, ...], nullable: bool = False) -> str:
    clause = f"{column} IN (" + ", ".join(f"'{v}'" for v in values) + ")"
    if nullable:
        return f"{column} IS NULL OR {clause}"
    return clause


# ===========================================================================
# Templates
# ===========================================================================


class Template(Base):
    """crm.templates — reusable outreach email template."""

    __tablename__ = "templates"
    __table_args__ = (
        CheckConstraint(_in_check("status", TEMPLATE_STATUSES), name="ck_template_status"),
        CheckConstraint(
            _in_check("access_level", ACCESS_LEVELS), name="ck_template_access_level"
        ),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subject_line: Mapped[str] = mapped_column(Text, nullable=False)
    body_html: Mapped[str] = mapped_column(Text, nullable=False)
    body_plain: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    category: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default="{}"
    )
    persona: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    company_size: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sales_stage: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    campaign_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    language: Mapped[str] = mapped_column(Text, nullable=False, server_default="en")

    status: Mapped[str] = mapped_column(Text, nullable=False, server_default="draft")
    access_level: Mapped[str] = mapped_column(
        Text, nullable=False, server_default="personal"
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    parent_template_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.templates.id", ondelete="SET NULL"),
        nullable=True,
    )

    approval_status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    approved_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), nullable=True
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    approval_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    last_used_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    use_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    custom_fields: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, server_default="{}"
    )
    is_public: Mapped[bool] = mapped_column(Boolean, server_default="false", nullable=False)

    # Relationships
    performance: Mapped[Optional["TemplatePerformance"]] = relationship(
        "TemplatePerformance",
        back_populates="template",
        uselist=False,
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Template {self.name} ({self.status})>"


class TemplatePerformance(Base):
    """crm.template_performance — aggregated send metrics, 1:1 with a template.

    Computed by the analytics job; read-only from the repository layer.
    """

    __tablename__ = "template_performance"
    __table_args__ = {"schema": "crm"}

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.templates.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    sends: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    opens: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    clicks: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    replies: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    bounces: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    conversions: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    open_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    click_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    reply_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    bounce_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    conversion_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(5, 2), nullable=True
    )

    avg_time_to_reply_hours: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(8, 2), nullable=True
    )
    best_send_day: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    best_send_hour: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    template: Mapped["Template"] = relationship("Template", back_populates="performance")


class TemplateFavorite(Base):
    """crm.template_favorites — (user, template) membership; presence means favorited."""

    __tablename__ = "template_favorites"
    __table_args__ = {"schema": "crm"}

    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.templates.id", ondelete="CASCADE"),
        primary_key=True,
    )
    favorited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


# ===========================================================================
# Snippet library
# ===========================================================================


class TemplateSnippet(Base):
    """crm.template_snippets — reusable fragment (intro, CTA, ...) for composing templates."""

    __tablename__ = "template_snippets"
    __table_args__ = (
        CheckConstraint(
            _in_check("snippet_type", SNIPPET_TYPES, nullable=True),
            name="ck_snippet_type",
        ),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    snippet_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default="{}"
    )
    use_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# ===========================================================================
# Collections
# ===========================================================================


class TemplateCollection(Base):
    """crm.template_collections — named grouping of templates within a workspace."""

    __tablename__ = "template_collections"
    __table_args__ = (
        CheckConstraint(
            _in_check("collection_type", COLLECTION_TYPES),
            name="ck_collection_type",
        ),
        {"schema": "crm"},
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    workspace_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    collection_type: Mapped[str] = mapped_column(
        Text, nullable=False, server_default="custom"
    )
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, server_default="false", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TemplateCollectionItem(Base):
    """crm.template_collection_items — (collection, template) membership."""

    __tablename__ = "template_collection_items"
    __table_args__ = {"schema": "crm"}

    collection_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.template_collections.id", ondelete="CASCADE"),
        primary_key=True,
    )
    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("crm.templates.id", ondelete="CASCADE"),
        primary_key=True,
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
