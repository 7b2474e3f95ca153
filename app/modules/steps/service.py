from app.config.settings import settings
from app.core.exceptions import PermissionDeniedError, UnavailableError
from app.modules.profiles.service import ProfileService
from app.modules.steps.schemas import StepSyncResponse
from app.modules.steps.source import StepSource, current_week_window
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class StepSyncService:
    def __init__(self, profiles: ProfileService):
        self.profiles = profiles

    def sync_weekly_steps(
        self,
        user_id: str,
        source: StepSource,
        now: Optional[datetime] = None
    ) -> StepSyncResponse:
        """Write this week's step total to the profile. A failing source keeps the stored total."""
        window_start, window_end = current_week_window(
            now or datetime.now(timezone.utc), settings.week_start_day
        )
        try:
            steps = source.fetch_step_count(window_start, window_end)
        except (PermissionDeniedError, UnavailableError) as e:
            logger.warning(f"Step source failed for {user_id} ({e.kind}), keeping stored count")
            profile = self.profiles.fetch_profile(user_id)
            return StepSyncResponse(
                weekly_step_count=profile.weekly_step_count,
                window_start=window_start,
                window_end=window_end,
                stale=True,
                reason=e.kind,
            )

        profile = self.profiles.write_profile_fields(user_id, {"weekly_step_count": max(int(steps), 0)})
        logger.debug(f"Synced {profile.weekly_step_count} weekly steps for {user_id}")
        return StepSyncResponse(
            weekly_step_count=profile.weekly_step_count,
            window_start=window_start,
            window_end=window_end,
        )
