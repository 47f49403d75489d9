"""journal and thesis catalog baseline

Revision ID: 0001_catalog_baseline
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_catalog_baseline"
down_revision = None
branch_labels = None
depends_on = None


def _file_and_counter_columns() -> list[sa.Column]:
    return [
        sa.Column("cover_url", sa.String(500), nullable=True),
        sa.Column("pdf_url", sa.String(500), nullable=True),
        sa.Column("file_size", sa.String(50), nullable=True),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "journals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("title_kh", sa.String(500), nullable=True),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("pages", sa.Integer(), nullable=True),
        sa.Column("volume", sa.String(50), nullable=True),
        sa.Column("issn", sa.String(20), nullable=True),
        sa.Column("abstract", sa.Text(), nullable=True),
        *_file_and_counter_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_journals_year", "journals", ["year"])
    op.create_index("ix_journals_category", "journals", ["category"])
    op.create_index("ix_journals_issn", "journals", ["issn"])
    op.create_index("ix_journals_created_at", "journals", ["created_at"])

    op.create_table(
        "theses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("title_kh", sa.String(500), nullable=True),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("author_kh", sa.String(255), nullable=True),
        sa.Column("university", sa.String(255), nullable=True),
        sa.Column("university_kh", sa.String(255), nullable=True),
        sa.Column("supervisor", sa.String(255), nullable=True),
        sa.Column("supervisor_kh", sa.String(255), nullable=True),
        sa.Column("major", sa.String(255), nullable=True),
        sa.Column("major_kh", sa.String(255), nullable=True),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.Column("abstract_kh", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("description_kh", sa.Text(), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("category_kh", sa.String(100), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("language", sa.String(50), nullable=True),
        sa.Column("pages", sa.Integer(), nullable=True),
        *_file_and_counter_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_theses_year", "theses", ["year"])
    op.create_index("ix_theses_category", "theses", ["category"])
    op.create_index("ix_theses_created_at", "theses", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_theses_created_at", table_name="theses")
    op.drop_index("ix_theses_category", table_name="theses")
    op.drop_index("ix_theses_year", table_name="theses")
    op.drop_table("theses")

    op.drop_index("ix_journals_created_at", table_name="journals")
    op.drop_index("ix_journals_issn", table_name="journals")
    op.drop_index("ix_journals_category", table_name="journals")
    op.drop_index("ix_journals_year", table_name="journals")
    op.drop_table("journals")
