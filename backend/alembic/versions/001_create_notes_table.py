"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `notes` table: title, content, cached summary, timestamps.
How:   UUID primary key generated server-side by gen_random_uuid(),
       TIMESTAMP WITH TIME ZONE for both timestamps.

Rollback: downgrade() drops the table (all notes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the notes table and its list-ordering index."""
    op.create_table(
        "notes",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique identifier, exposed in URLs",
        ),
        sa.Column(
            "title",
            sa.String(200),
            nullable=False,
            comment="Trimmed note title",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Note body as entered by the user",
        ),
        # '' until the first summarization
        sa.Column(
            "summary",
            sa.Text(),
            nullable=False,
            server_default=sa.text("''"),
            comment="Cached LLM summary of the content",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was last saved (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # GET /api/notes orders by updated_at DESC
    op.create_index(
        "idx_notes_updated_at",
        "notes",
        [sa.text("updated_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_updated_at", table_name="notes")
    op.drop_table("notes")
