from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core import security
from app.core.logging_middleware import get_client_ip, get_user_agent
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.token import Token
from app.schemas.user import UserCreate, UserLogin, UserOut, UserSummary
from app.services.user_service import create_user, login_user

router = APIRouter()


def _token_for(user: User) -> dict:
    token = security.create_access_token(data={"sub": user.email})
    return {"access_token": token, "token_type": "bearer", "user": UserSummary.model_validate(user)}


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, request: Request, db: Session = Depends(get_db)):
    """Create an account and return an access token for it"""
    user = create_user(db, data, get_client_ip(request), get_user_agent(request))
    return _token_for(user)


@router.post("/login", response_model=Token)
def login(data: UserLogin, request: Request, db: Session = Depends(get_db)):
    user = login_user(db, data.email, data.password, get_client_ip(request), get_user_agent(request))
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _token_for(user)


@router.get("/users/me", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
