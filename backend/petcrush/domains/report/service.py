"""Report service. Reports are only recorded; review happens out of band."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.repository import BaseRepository
from petcrush.domains.pet.service import pet_service
from petcrush.domains.report.models import Report, ReportStatus

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self):
        self.repository = BaseRepository(Report)

    async def create_report(self, session: AsyncSession, reporter_id: str, target_pet_id: int, reason: str) -> Report:
        await pet_service.require_pet(session, target_pet_id)
        report = await self.repository.create(session, Report(
            reporter_id=reporter_id,
            target_pet_id=target_pet_id,
            reason=reason,
            status=ReportStatus.PENDING.value,
        ))
        logger.info(f"Report {report.id} filed against pet {target_pet_id}")
        return report


# Singleton instance
report_service = ReportService()
