"""Template library: templates, performance, favorites, snippets, collections.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS crm")

    # ─── Templates ───────────────────────────────────────────────────────────

    op.create_table(
        "templates",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("subject_line", sa.Text, nullable=False),
        sa.Column("body_html", sa.Text, nullable=False),
        sa.Column("body_plain", sa.Text, nullable=True),
        sa.Column("category", sa.Text, nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.Text), nullable=False, server_default="{}"),
        sa.Column("persona", sa.Text, nullable=True),
        sa.Column("industry", sa.Text, nullable=True),
        sa.Column("company_size", sa.Text, nullable=True),
        sa.Column("sales_stage", sa.Text, nullable=True),
        sa.Column("campaign_type", sa.Text, nullable=True),
        sa.Column("tone", sa.Text, nullable=True),
        sa.Column("language", sa.Text, nullable=False, server_default="en"),
        sa.Column("status", sa.Text, nullable=False, server_default="draft"),
        sa.Column("access_level", sa.Text, nullable=False, server_default="personal"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("parent_template_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("approval_status", sa.Text, nullable=True),
        sa.Column("approved_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_notes", sa.Text, nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("use_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("custom_fields", sa.JSON, nullable=False, server_default="{}"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false"),
        sa.CheckConstraint("status IN ('draft', 'active', 'archived')", name="ck_template_status"),
        sa.CheckConstraint(
            "access_level IN ('personal', 'team', 'company')",
            name="ck_template_access_level",
        ),
        sa.ForeignKeyConstraint(
            ["parent_template_id"], ["crm.templates.id"],
            name="fk_template_parent", ondelete="SET NULL",
        ),
        schema="crm",
    )
    op.create_index("ix_templates_workspace_id", "templates", ["workspace_id"], schema="crm")
    op.create_index(
        "ix_templates_tags", "templates", ["tags"], schema="crm", postgresql_using="gin"
    )

    op.create_table(
        "template_performance",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("template_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sends", sa.Integer, nullable=False, server_default="0"),
        sa.Column("opens", sa.Integer, nullable=False, server_default="0"),
        sa.Column("clicks", sa.Integer, nullable=False, server_default="0"),
        sa.Column("replies", sa.Integer, nullable=False, server_default="0"),
        sa.Column("bounces", sa.Integer, nullable=False, server_default="0"),
        sa.Column("conversions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("open_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("click_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("reply_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("bounce_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("conversion_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("avg_time_to_reply_hours", sa.Numeric(8, 2), nullable=True),
        sa.Column("best_send_day", sa.Text, nullable=True),
        sa.Column("best_send_hour", sa.Integer, nullable=True),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("template_id", name="uq_template_performance_template"),
        sa.ForeignKeyConstraint(
            ["template_id"], ["crm.templates.id"],
            name="fk_performance_template", ondelete="CASCADE",
        ),
        schema="crm",
    )

    op.create_table(
        "template_favorites",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("template_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("favorited_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("user_id", "template_id", name="pk_template_favorites"),
        sa.ForeignKeyConstraint(
            ["template_id"], ["crm.templates.id"],
            name="fk_favorite_template", ondelete="CASCADE",
        ),
        schema="crm",
    )

    # ─── Snippets ────────────────────────────────────────────────────────────

    op.create_table(
        "template_snippets",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("snippet_type", sa.Text, nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.Text), nullable=False, server_default="{}"),
        sa.Column("use_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "snippet_type IS NULL OR snippet_type IN ('intro', 'value_prop', 'social_proof', "
            "'cta', 'pain_point', 'closing', 'custom')",
            name="ck_snippet_type",
        ),
        schema="crm",
    )
    op.create_index(
        "ix_template_snippets_workspace_id", "template_snippets", ["workspace_id"], schema="crm"
    )

    # ─── Collections ─────────────────────────────────────────────────────────

    op.create_table(
        "template_collections",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("collection_type", sa.Text, nullable=False, server_default="custom"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("collection_type IN ('system', 'custom')", name="ck_collection_type"),
        schema="crm",
    )
    op.create_index(
        "ix_template_collections_workspace_id", "template_collections", ["workspace_id"], schema="crm"
    )

    op.create_table(
        "template_collection_items",
        sa.Column("collection_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("template_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("collection_id", "template_id", name="pk_template_collection_items"),
        sa.ForeignKeyConstraint(
            ["collection_id"], ["crm.template_collections.id"],
            name="fk_item_collection", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["template_id"], ["crm.templates.id"],
            name="fk_item_template", ondelete="CASCADE",
        ),
        schema="crm",
    )


def downgrade() -> None:
    # Drop in reverse dependency order
    op.drop_table("template_collection_items", schema="crm")
    op.drop_index("ix_template_collections_workspace_id", table_name="template_collections", schema="crm")
    op.drop_table("template_collections", schema="crm")
    op.drop_index("ix_template_snippets_workspace_id", table_name="template_snippets", schema="crm")
    op.drop_table("template_snippets", schema="crm")
    op.drop_table("template_favorites", schema="crm")
    op.drop_table("template_performance", schema="crm")
    op.drop_index("ix_templates_tags", table_name="templates", schema="crm")
    op.drop_index("ix_templates_workspace_id", table_name="templates", schema="crm")
    op.drop_table("templates", schema="crm")
