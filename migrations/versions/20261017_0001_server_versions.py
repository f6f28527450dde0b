"""Create the server_versions table."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "server_versions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("server_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("version", sa.String(length=255), nullable=False),
        sa.Column("server_json", sa.JSON(), nullable=False),
        sa.Column("meta_json", sa.JSON(), nullable=False),
        sa.Column(
            "published_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("is_latest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("search_text", sa.Text(), nullable=False, server_default=""),
        sa.UniqueConstraint("server_name", "version", name="uq_server_versions_name_version"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_server_versions_name", "server_versions", ["server_name"])
    op.create_index("ix_server_versions_latest", "server_versions", ["is_latest"])
    op.create_index("ix_server_versions_updated_at", "server_versions", ["updated_at"])
    op.create_index("ix_server_versions_search", "server_versions", ["search_text"])


def downgrade() -> None:
    op.drop_index("ix_server_versions_search", table_name="server_versions")
    op.drop_index("ix_server_versions_updated_at", table_name="server_versions")
    op.drop_index("ix_server_versions_latest", table_name="server_versions")
    op.drop_index("ix_server_versions_name", table_name="server_versions")
    op.drop_table("server_versions")
