from enum import Enum
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime


class StepSourceStatus(str, Enum):
    OK = "ok"
    DENIED = "denied"  # user refused health data access on the device
    UNAVAILABLE = "unavailable"


class StepSample(BaseModel):
    start: datetime
    end: datetime
    count: int = Field(ge=0)

    @model_validator(mode="after")
    def check_interval(self):
        if self.end < self.start:
            raise ValueError("Sample end is before its start")
        return self


class StepSyncRequest(BaseModel):
    samples: List[StepSample] = []
    source_status: StepSourceStatus = StepSourceStatus.OK


class StepSyncResponse(BaseModel):
    weekly_step_count: int
    window_start: datetime
    window_end: datetime
    stale: bool = False
    reason: Optional[str] = None
