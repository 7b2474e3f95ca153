from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id, get_profile_service
from app.modules.profiles.service import ProfileService
from app.modules.steps.schemas import StepSyncRequest, StepSyncResponse
from app.modules.steps.service import StepSyncService
from app.modules.steps.source import ReportedStepSource

router = APIRouter(prefix="/steps", tags=["steps"])


def get_step_sync_service(profiles: ProfileService = Depends(get_profile_service)) -> StepSyncService:
    return StepSyncService(profiles)


@router.post("/sync", response_model=StepSyncResponse)
async def sync_steps(
    body: StepSyncRequest,
    user_id: str = Depends(get_current_user_id),
    service: StepSyncService = Depends(get_step_sync_service)
):
    """Sum the reported samples for the current week into weekly_step_count"""
    source = ReportedStepSource(body.samples, body.source_status)
    return service.sync_weekly_steps(user_id, source)
