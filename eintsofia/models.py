from sqlalchemy import Column, DateTime, Index, Integer, JSON, String

# Import Base from database.py to ensure we use the same Base instance
from eintsofia.database import Base

from eintsofia.utils.timezone_utils import utc_now


class Document(Base):
    """
    Append-only document in a named collection (feedback logs, analysis logs,
    saved analyses). ``created_at`` is the server-assigned timestamp.
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_collection_created_at", "collection", "created_at"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String, nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
