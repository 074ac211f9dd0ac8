"""initial schema: catalog tables (species/backgrounds/classes + owned features) and characters

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_COINS = '{"platinum":0,"gold":0,"electrum":0,"silver":0,"copper":0}'


def _feature_table(name: str, parent_col: str, parent_table: str, *extra: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *extra,
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column(parent_col, sa.Uuid(), sa.ForeignKey(f"{parent_table}.id"), nullable=True),
    )
    op.create_index(f"ix_{name}_{parent_col}", name, [parent_col], unique=False)


def upgrade() -> None:
    # ---- catalog ----
    op.create_table(
        "species",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_index("ix_species_name", "species", ["name"], unique=True)
    _feature_table("traits", "species_id", "species")

    op.create_table(
        "backgrounds",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_index("ix_backgrounds_name", "backgrounds", ["name"], unique=True)
    _feature_table("background_features", "background_id", "backgrounds")

    op.create_table(
        "character_classes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("hit_die", sa.String(), nullable=False),
    )
    op.create_index("ix_character_classes_name", "character_classes", ["name"], unique=True)
    _feature_table(
        "class_features", "class_id", "character_classes",
        sa.Column("level", sa.Integer(), nullable=False),
    )

    # ---- characters ----
    op.create_table(
        "characters",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("species_id", sa.Uuid(), sa.ForeignKey("species.id"), nullable=False),
        sa.Column("background_id", sa.Uuid(), sa.ForeignKey("backgrounds.id"), nullable=False),
        sa.Column("class_id", sa.Uuid(), sa.ForeignKey("character_classes.id"), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("temporary_hp", sa.Integer(), nullable=False),
        sa.Column("current_hp", sa.Integer(), nullable=False),
        sa.Column("max_hp", sa.Integer(), nullable=False),
        sa.Column("speed", sa.Integer(), nullable=False),
        sa.Column("strength", sa.Integer(), nullable=False),
        sa.Column("dexterity", sa.Integer(), nullable=False),
        sa.Column("constitution", sa.Integer(), nullable=False),
        sa.Column("intelligence", sa.Integer(), nullable=False),
        sa.Column("wisdom", sa.Integer(), nullable=False),
        sa.Column("charisma", sa.Integer(), nullable=False),
        sa.Column("coins", sa.Text(), nullable=False, server_default=DEFAULT_COINS),
        sa.Column("items", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("details", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("skills", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("class_actions", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("spell_slots", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("spells", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("weapons", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_characters_species_id", "characters", ["species_id"], unique=False)
    op.create_index("ix_characters_background_id", "characters", ["background_id"], unique=False)
    op.create_index("ix_characters_class_id", "characters", ["class_id"], unique=False)


def downgrade() -> None:
    op.drop_table("characters")
    op.drop_table("class_features")
    op.drop_table("character_classes")
    op.drop_table("background_features")
    op.drop_table("backgrounds")
    op.drop_table("traits")
    op.drop_table("species")
