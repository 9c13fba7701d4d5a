"""Initial media library schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261001_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "asset",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("media_type", sa.String(length=16), nullable=False),
        sa.Column("storage_url", sa.String(length=1024), nullable=False),
        sa.Column("storage_provider_id", sa.String(length=512), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("album_id", sa.String(length=32)),
        sa.Column("favorite", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("lifecycle_state", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("locked_at", sa.DateTime()),
        sa.Column("trashed_at", sa.DateTime()),
        sa.Column("scheduled_delete_at", sa.DateTime()),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_asset_user_id", "asset", ["user_id"])
    op.create_index("ix_asset_album_id", "asset", ["album_id"])
    op.create_index("ix_asset_scheduled_delete_at", "asset", ["scheduled_delete_at"])
    op.create_index("ix_asset_user_state", "asset", ["user_id", "lifecycle_state"])

    op.create_table(
        "folder",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("is_folder", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("parent_folder_id", sa.String(length=32)),
        sa.Column("cover_url", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_folder_user_id", "folder", ["user_id"])
    op.create_index("ix_folder_parent_folder_id", "folder", ["parent_folder_id"])

    op.create_table(
        "folder_media",
        sa.Column(
            "asset_id",
            sa.String(length=32),
            sa.ForeignKey("asset.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "folder_id",
            sa.String(length=32),
            sa.ForeignKey("folder.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_folder_media_folder_id", "folder_media", ["folder_id"])

    op.create_table(
        "locked_folder_session",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("has_access", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("session_expires", sa.DateTime()),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )


def downgrade() -> None:
    op.drop_table("locked_folder_session")
    op.drop_index("ix_folder_media_folder_id", table_name="folder_media")
    op.drop_table("folder_media")
    op.drop_index("ix_folder_parent_folder_id", table_name="folder")
    op.drop_index("ix_folder_user_id", table_name="folder")
    op.drop_table("folder")
    op.drop_index("ix_asset_user_state", table_name="asset")
    op.drop_index("ix_asset_scheduled_delete_at", table_name="asset")
    op.drop_index("ix_asset_album_id", table_name="asset")
    op.drop_index("ix_asset_user_id", table_name="asset")
    op.drop_table("asset")
