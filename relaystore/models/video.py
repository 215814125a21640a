import uuid

from sqlalchemy import Column, DateTime, String, Uuid, func

from relaystore.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    # References a Post without a relationship; exposed as a Post global ID
    post_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Video(id={self.id}, name='{self.name}')>"
