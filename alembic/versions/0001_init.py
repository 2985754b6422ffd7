"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
  op.create_table(
    "tickets",
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("title", sa.String(), nullable=False),
    sa.Column("description", sa.Text(), nullable=False, server_default=""),
    sa.Column("column_name", sa.String(), nullable=False, server_default="todo"),
    sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.CheckConstraint("column_name IN ('todo', 'doing', 'done')", name="ck_tickets_column_name"),
    sa.CheckConstraint("position >= 0", name="ck_tickets_position_nonneg"),
  )
  op.create_index("ix_tickets_column_position", "tickets", ["column_name", "position"], unique=False)

  op.create_table(
    "tags",
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("name", sa.String(), nullable=False, unique=True),
    sa.Column("color", sa.String(), nullable=False, server_default="#f179af"),
  )

  op.create_table(
    "ticket_tags",
    sa.Column("ticket_id", sa.Integer(), sa.ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True),
    sa.Column("tag_id", sa.Integer(), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
  )

  op.create_table(
    "comments",
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("ticket_id", sa.Integer(), sa.ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False),
    sa.Column("body", sa.Text(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_comments_ticket_id", "comments", ["ticket_id"], unique=False)


def downgrade() -> None:
  op.drop_index("ix_comments_ticket_id", table_name="comments")
  op.drop_table("comments")
  op.drop_table("ticket_tags")
  op.drop_table("tags")
  op.drop_index("ix_tickets_column_position", table_name="tickets")
  op.drop_table("tickets")
