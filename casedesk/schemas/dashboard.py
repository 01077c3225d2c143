from pydantic import BaseModel

class DashboardSummary(BaseModel):
    active_cases: int = 0
    tasks_today: int = 0
    pending_tasks: int = 0
