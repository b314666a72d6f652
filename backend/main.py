from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from auth import CurrentUser, authenticate_user, create_access_token, hash_password
from config import ACCESS_TOKEN_EXPIRE_MINUTES, ENVIRONMENT, configure_logging
from database import create_db_and_tables, get_db
from decks import router as decks_router
from models import User
from repositories import UserRepository
from schemas import CreateUserRequest, Token, UserResponse

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(ENVIRONMENT)
    create_db_and_tables()
    logger.info("application_started", environment=ENVIRONMENT)
    yield


app = FastAPI(title="Flashcard Decks", lifespan=lifespan)

app.include_router(decks_router)

### GET ###

@app.get("/users/me", response_model=UserResponse)
async def get_users_me(current_user: CurrentUser) -> User:
    return current_user

### POST ###

@app.post("/token", status_code=status.HTTP_201_CREATED)
async def login(form_data: Annotated[OAuth2PasswordRequestForm, Depends()], db: Session = Depends(get_db)) -> Token:
    user = authenticate_user(form_data.username, form_data.password, db)
    if not user:
        logger.info("login_failed")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password", headers={"WWW-Authenticate": "Bearer"},)
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(data={"sub": user.username}, expires_delta=access_token_expires)
    return Token(access_token=access_token)

@app.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def create_user(new_user: CreateUserRequest, db: Session = Depends(get_db)) -> User:
    users = UserRepository(db)
    if users.get_by_username(new_user.username) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Username {new_user.username} is already taken.")
    return users.insert(new_user.username, hash_password(new_user.password))
