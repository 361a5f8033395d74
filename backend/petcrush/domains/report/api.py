"""Report endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.database import get_session
from petcrush.domains.auth.deps import get_current_user
from petcrush.domains.report.schemas import ReportCreate, ReportResponse
from petcrush.domains.report.service import report_service
from petcrush.domains.user.models import User

router = APIRouter()


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED, summary="Report a pet")
async def create_report(
    data: ReportCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    report = await report_service.create_report(session, current_user.id, data.target_pet_id, data.reason)
    await session.commit()
    return report
