"""
MemoPad Backend — Memo SQLAlchemy Model
========================================

What:  ORM model representing the `memos` table in the SQLite file.
Why:   Gives the storage adapter typed columns to build parameterized
       statements from, and gives `create_all` the table definition.

Table Design:
    - id: INTEGER PRIMARY KEY AUTOINCREMENT. AUTOINCREMENT (not just rowid
      aliasing) stops SQLite from handing out the id of a deleted row again.
    - text: TEXT NOT NULL. No length limit; a memo either has text or does
      not exist.
    - No timestamp: creation order is the id order.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from memopad.database import Base


class Memo(Base):
    """A single memo row."""

    __tablename__ = "memos"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    text: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Memo(id={self.id}, text={self.text!r})>"
