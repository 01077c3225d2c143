from fastapi import APIRouter
from casedesk.api.api_v1.endpoints import auth, cases, contacts, dashboard, health, tasks, users

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(cases.router, prefix="/cases", tags=["cases"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
