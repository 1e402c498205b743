"""
Quillnote Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by NoteService for CRUD and summarization, and by Alembic.

Table Design Rationale:
    - UUID primary key: non-sequential, safe to expose in URLs
    - title: short, trimmed, required (VARCHAR(200))
    - content: unbounded TEXT, required
    - summary: last LLM summary for this note; '' until summarized
    - created_at / updated_at: UTC with timezone

    Index on updated_at DESC:
        The notes list is ordered by most recent edit first.

    Column types are the dialect-neutral Uuid/DateTime so the same model
    runs on PostgreSQL in production and SQLite in tests.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from quillnote.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user's note.

    Lifecycle:
        1. Created with title + content, empty summary
        2. Edited any number of times (updated_at bumps, summary kept)
        3. Summarized on demand (summary overwritten, updated_at bumps)
        4. Deleted (hard delete)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Trimmed note title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body as entered by the user",
    )

    # Overwritten on every summarization; never cleared by edits
    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Cached LLM summary of the content",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was last saved (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_updated_at", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', updated_at='{self.updated_at}')>"
