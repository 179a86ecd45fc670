# salary_tracker/auth/router.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from salary_tracker import config
from salary_tracker.auth.dependencies import get_current_user
from salary_tracker.auth.jwt_handler import token_for_user
from salary_tracker.auth.models import User
from salary_tracker.auth.schemas import AuthResponse, LoginSchema, RegisterSchema, UserOut
from salary_tracker.database import get_db
from salary_tracker.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(config.RATE_LIMIT_AUTH)
def register(request: Request, data: RegisterSchema, db: Session = Depends(get_db)):
    existing = db.query(User).filter(or_(User.email == data.email, User.username == data.username)).first()
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        username=data.username,
        email=data.email,
        password_hash=generate_password_hash(data.password),
        role="admin",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user id=%s username=%s", user.id, user.username)

    return {"message": "User registered successfully", "user": user, "token": token_for_user(user)}


@router.post("/login", response_model=AuthResponse)
@limiter.limit(config.RATE_LIMIT_AUTH)
def login(request: Request, data: LoginSchema, db: Session = Depends(get_db)):
    email = data.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if not user or not check_password_hash(user.password_hash, data.password):
        logger.warning("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info("User %s logged in", user.id)
    return {"message": "Login successful", "user": user, "token": token_for_user(user)}


@router.get("/profile", response_model=UserOut)
def profile(user: User = Depends(get_current_user)):
    return user
