from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from schemas import EntryCreate, EntryUpdate, EntryResponse, TokenClaims
from security import get_current_user
import services

# Largest id a 64-bit integer column can hold
MAX_ENTRY_ID = 2**63 - 1

router = APIRouter()


@router.get("/{year}/{month}", response_model=List[EntryResponse])
def list_entries_by_month(
        year: int = Path(..., ge=1, le=9998),
        month: int = Path(..., ge=1, le=12),
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    """List the caller's entries dated within one calendar month"""
    return services.list_entries_by_month(db, current_user.user_id, year, month)


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
        entry_data: EntryCreate,
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    """Create an income or expense entry"""
    return services.create_entry(db, current_user.user_id, entry_data)


@router.get("", response_model=List[EntryResponse])
def list_entries(
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    return services.list_entries(db, current_user.user_id)


@router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(
        entry_id: int = Path(..., ge=1, le=MAX_ENTRY_ID),
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    try:
        return services.get_entry(db, current_user.user_id, entry_id)
    except services.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put("/{entry_id}", response_model=EntryResponse)
def update_entry(
        entry_data: EntryUpdate,
        entry_id: int = Path(..., ge=1, le=MAX_ENTRY_ID),
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    """Update the supplied fields of an entry"""
    try:
        return services.update_entry(db, current_user.user_id, entry_id, entry_data)
    except services.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
        entry_id: int = Path(..., ge=1, le=MAX_ENTRY_ID),
        db: Session = Depends(get_db),
        current_user: TokenClaims = Depends(get_current_user)
):
    try:
        services.delete_entry(db, current_user.user_id, entry_id)
    except services.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
