from sqlalchemy import Column, String, Text

from local_notes.db import Base


class StoredValue(Base):
    """SQLAlchemy model for one slot of local key-value storage."""
    __tablename__ = "local_storage"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
