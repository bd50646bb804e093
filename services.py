import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from common.enum import EntryCategoryEnum
from models import Entry, User, utcnow
from schemas import DashboardResponse, EntryCreate, EntryUpdate, UserLogin, UserRegister
from security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

RECENT_ENTRIES_LIMIT = 3
NULLABLE_ENTRY_FIELDS = {"description"}


class EntityNotFoundError(RuntimeError):
    """Raised when an entity cannot be located for the caller."""


class EntityConflictError(RuntimeError):
    """Raised when a unique constraint is violated."""


class InvalidCredentialsError(RuntimeError):
    """Raised when a password does not match the stored hash."""


# ---------------- USERS ---------------- #

def create_user(db: Session, user: UserRegister) -> User:
    db_user = User(username=user.username, hashed_password=hash_password(user.password))
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Registration failed: username %r already exists", user.username)
        raise EntityConflictError("Username already registered") from exc
    db.refresh(db_user)
    logger.info("User created with ID: %s", db_user.id)
    return db_user


def authenticate_user(db: Session, credentials: UserLogin) -> Tuple[User, str]:
    """Check ``credentials`` and return the user together with a fresh access token."""
    user = db.query(User).filter(User.username == credentials.username).first()

    if not user:
        logger.warning("Login failed: user %r not found", credentials.username)
        raise EntityNotFoundError("User not found")

    if not verify_password(credentials.password, user.hashed_password):
        logger.warning("Login failed: wrong password for user %r", credentials.username)
        raise InvalidCredentialsError("Wrong password")

    token = create_access_token(data={"userId": user.id, "username": user.username})
    logger.info("Login successful for user_id: %s", user.id)
    return user, token


# ---------------- ENTRIES ---------------- #

def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Half-open ``[start, end)`` range covering one calendar month (1-indexed)."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def _owned_entries(db: Session, user_id: int):
    return db.query(Entry).filter(Entry.user_id == user_id)


def list_entries(db: Session, user_id: int) -> List[Entry]:
    return _owned_entries(db, user_id).all()


def list_entries_by_month(db: Session, user_id: int, year: int, month: int) -> List[Entry]:
    start, end = month_bounds(year, month)
    return _owned_entries(db, user_id).filter(
        Entry.date >= start,
        Entry.date < end
    ).all()


def get_entry(db: Session, user_id: int, entry_id: int) -> Entry:
    entry = _owned_entries(db, user_id).filter(Entry.id == entry_id).first()
    if entry is None:
        raise EntityNotFoundError("Entry not found")
    return entry


def create_entry(db: Session, user_id: int, entry_in: EntryCreate) -> Entry:
    entry = Entry(
        user_id=user_id,
        amount=entry_in.amount,
        description=entry_in.description,
        date=entry_in.date or utcnow(),
        category=entry_in.category
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def update_entry(db: Session, user_id: int, entry_id: int, update_in: EntryUpdate) -> Entry:
    entry = get_entry(db, user_id, entry_id)
    for field, value in update_in.model_dump(exclude_unset=True).items():
        # only the description may be cleared with an explicit null
        if value is None and field not in NULLABLE_ENTRY_FIELDS:
            continue
        setattr(entry, field, value)
    db.commit()
    db.refresh(entry)
    return entry


def delete_entry(db: Session, user_id: int, entry_id: int) -> None:
    entry = get_entry(db, user_id, entry_id)
    db.delete(entry)
    db.commit()


# ---------------- DASHBOARD ---------------- #

def current_month_start(now: Optional[datetime] = None) -> datetime:
    now = now or utcnow()
    return datetime(now.year, now.month, 1)


def get_dashboard_data(db: Session, user_id: int, now: Optional[datetime] = None) -> DashboardResponse:
    """Totals and entry lists for everything dated since the first of the current month."""
    entries = _owned_entries(db, user_id).filter(
        Entry.date >= current_month_start(now)
    ).order_by(Entry.category.asc()).all()

    income = [e for e in entries if e.category == EntryCategoryEnum.INCOME]
    expenses = [e for e in entries if e.category == EntryCategoryEnum.EXPENSE]

    return DashboardResponse(
        current_month_income_total=sum(e.amount for e in income),
        current_month_expense_total=sum(e.amount for e in expenses),
        current_month_expenses=expenses,
        current_month_income=income,
        current_month_entries=entries,
    )


def get_recent_entries(db: Session, user_id: int, limit: int = RECENT_ENTRIES_LIMIT) -> List[Entry]:
    return _owned_entries(db, user_id).order_by(Entry.date.desc()).limit(limit).all()
