"""
Persistence of per-user favorite locations.

Every query is filtered by user_id, so a row owned by someone else looks
exactly like a missing one.
"""
import logging
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import Conflict, NotFound
from .models import FavoriteLocation, NAME_MAX_LENGTH
from .schemas import GeoCandidate

logger = logging.getLogger(__name__)


class FavoriteLocationStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, user_id: int, candidate: GeoCandidate) -> FavoriteLocation:
        """
        Save ``candidate`` for ``user_id``.

        Raises Conflict if the user already has a favorite with exactly the
        same latitude and longitude.
        """
        existing = (
            await self.session.execute(
                select(FavoriteLocation).where(
                    FavoriteLocation.user_id == user_id,
                    FavoriteLocation.latitude == candidate.latitude,
                    FavoriteLocation.longitude == candidate.longitude,
                )
            )
        ).scalars().first()
        if existing is not None:
            logger.info(f"User {user_id} - location '{candidate.name}' already in favorites (id={existing.id})")
            raise Conflict(f"Location '{candidate.name}' is already in your favorites.")

        row = FavoriteLocation(
            user_id=user_id,
            name=candidate.name[:NAME_MAX_LENGTH],
            latitude=candidate.latitude,
            longitude=candidate.longitude,
        )
        self.session.add(row)
        await self.session.commit()
        logger.info(f"User {user_id} - saved favorite location id={row.id} '{row.name}'")
        return row

    async def list(self, user_id: int) -> List[FavoriteLocation]:
        rows = (
            await self.session.execute(
                select(FavoriteLocation)
                .where(FavoriteLocation.user_id == user_id)
                .order_by(FavoriteLocation.id)
            )
        ).scalars().all()
        return list(rows)

    async def get(self, user_id: int, location_id: int) -> FavoriteLocation:
        row = (
            await self.session.execute(
                select(FavoriteLocation).where(
                    FavoriteLocation.id == location_id,
                    FavoriteLocation.user_id == user_id,
                )
            )
        ).scalars().first()
        if row is None:
            logger.warning(f"User {user_id} - favorite location id={location_id} not found or access denied")
            raise NotFound("Favorite location not found or access denied.")
        return row

    async def remove(self, user_id: int, location_id: int) -> FavoriteLocation:
        """Delete and return the row, or raise NotFound."""
        row = await self.get(user_id, location_id)
        await self.session.execute(
            delete(FavoriteLocation).where(
                FavoriteLocation.id == row.id,
                FavoriteLocation.user_id == user_id,
            )
        )
        await self.session.commit()
        logger.info(f"User {user_id} - deleted favorite location id={location_id} '{row.name}'")
        return row
