import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from relaystore.crud.base import CRUDBase
from relaystore.models.video import Video
from relaystore.schemas.video import VideoCreate


class CRUDVideo(CRUDBase[Video, VideoCreate]):
    async def aget_multi_by_post(
        self, db: AsyncSession, post_id: uuid.UUID
    ) -> list[Video]:
        result = await db.execute(
            select(Video).filter(Video.post_id == post_id).order_by(Video.id)
        )
        return list(result.scalars().all())


video = CRUDVideo(Video)
