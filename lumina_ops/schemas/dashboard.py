from pydantic import BaseModel


class JobStatsResponse(BaseModel):
    needs_cleaning: int
    in_progress: int
    completed: int
    cancelled: int
    overdue: int
