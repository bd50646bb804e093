from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import (
    UserRegister, UserLogin, LoginResponse, MessageResponse,
    AuthenticateResponse, TokenClaims,
)
from security import get_current_user, get_token_payload
import services

router = APIRouter()


@router.post("/signup", response_model=MessageResponse)
def signup(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user"""
    try:
        services.create_user(db, user_data)
    except services.EntityConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"message": "Registration successful"}


@router.post("/login", response_model=LoginResponse)
def login(login_data: UserLogin, db: Session = Depends(get_db)):
    """Login user and return an access token"""
    try:
        user, token = services.authenticate_user(db, login_data)
    except services.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except services.InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    return LoginResponse(token=token, user_id=user.id)


@router.get("/authenticate", response_model=AuthenticateResponse)
async def authenticate(payload: dict = Depends(get_token_payload)):
    """Echo the claims of a valid token"""
    return {"message": "Authenticated", "user": payload}


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: TokenClaims = Depends(get_current_user)):
    """Tokens are stateless; they stay valid until they expire"""
    return {"message": "Logout successful"}
