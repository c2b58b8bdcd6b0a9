from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class UbiUser(Base):
    """Historical (profile id, display name) pair.

    Both columns form the primary key: an id collects every name it was seen
    with and a name can point at several ids over time.
    """
    __tablename__ = 'ubi_user'

    id = Column(String(64), primary_key=True)
    name = Column(String(100), primary_key=True)

    # Metadata
    recorded_at = Column(DateTime, default=func.now(), nullable=False)

    __table_args__ = (Index('ix_ubi_user_name', 'name'),)

    def __repr__(self):
        return f"<UbiUser(id='{self.id}', name='{self.name}')>"
