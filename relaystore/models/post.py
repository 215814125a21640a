import uuid

from sqlalchemy import Column, DateTime, String, Uuid, func

from relaystore.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Post(id={self.id}, title='{self.title}')>"
