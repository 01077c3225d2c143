from fastapi import APIRouter, Depends
from supabase import AsyncClient
from casedesk.core.errors import StoreError
from casedesk.core.supabase import get_supabase
from casedesk.crud.case import CaseRepository

router = APIRouter()

@router.get("")
async def health_check(client: AsyncClient = Depends(get_supabase)):
    try:
        await CaseRepository(client).ping()
        db_status = "connected"
    except StoreError as e:
        db_status = f"error: {e.detail or e.user_message}"

    return {
        "status": "ok",
        "message": "API is running",
        "database": db_status
    }
