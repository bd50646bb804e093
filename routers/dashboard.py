from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from schemas import DashboardResponse, EntryResponse, TokenClaims
from security import get_current_user
import services

router = APIRouter()


@router.get("/data", response_model=DashboardResponse)
def get_dashboard_data(
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    """Income and expense totals for the current month"""
    return services.get_dashboard_data(db, current_user.user_id)


@router.get("/recent-entries", response_model=List[EntryResponse])
def get_recent_entries(
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    """The caller's most recently dated entries"""
    return services.get_recent_entries(db, current_user.user_id)
