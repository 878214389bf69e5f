from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc)


class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, autoincrement=True)

    original_url = Column(String(2048), nullable=False)

    # The unique index is what actually guarantees short_code uniqueness;
    # the counter only makes collisions rare.
    short_code = Column(String(6), unique=True, index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Link id={self.id} short_code={self.short_code!r}>"
