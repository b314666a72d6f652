import uuid
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from auth import CurrentUser
from config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from database import get_db
from models import Deck, User
from repositories import DeckRepository, UserRepository
from schemas import CreateDeckRequest, DeckListResponse, DeckResponse, Pagination, UpdateDeckRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/decks", tags=["decks"])


def get_deck_or_404(deck_id: uuid.UUID, db: Session) -> Deck:
    deck: Deck | None = DeckRepository(db).get(deck_id)
    if deck is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Deck with ID {deck_id} not found")
    return deck

def ensure_deck_owner(deck: Deck, user: User) -> None:
    """Reject the request unless the caller owns the deck. Must run before any mutation."""
    if deck.user_id != user.id:
        logger.warning("deck_access_forbidden", deck_id=str(deck.id), user_id=user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You do not have permission to modify this deck")

### GET ###

@router.get("", response_model=DeckListResponse)
async def list_decks(
    current_user: CurrentUser,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_LIMIT)] = DEFAULT_PAGE_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
    search: str | None = None,
    username: str | None = None,
    db: Session = Depends(get_db),
) -> DeckListResponse:
    owner_id: int | None = None
    if username:
        owner: User | None = UserRepository(db).get_by_username(username)
        if owner is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with username {username} not found")
        owner_id = owner.id
    decks = DeckRepository(db).list(limit=limit, offset=offset, search=search, owner_id=owner_id)
    return DeckListResponse(
        filter=username,
        search=search,
        pagination=Pagination(limit=limit, offset=offset),
        data=[DeckResponse.model_validate(deck) for deck in decks],
    )

@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck(deck_id: uuid.UUID, current_user: CurrentUser, db: Session = Depends(get_db)) -> Deck:
    return get_deck_or_404(deck_id, db)

### POST ###

@router.post("", status_code=status.HTTP_201_CREATED, response_model=DeckResponse)
async def create_deck(new_deck: CreateDeckRequest, current_user: CurrentUser, db: Session = Depends(get_db)) -> Deck:
    return DeckRepository(db).insert(new_deck.model_dump(), owner_id=current_user.id)

### PATCH ###

@router.patch("/{deck_id}", response_model=DeckResponse)
async def update_deck(deck_id: uuid.UUID, update_deck_request: UpdateDeckRequest, current_user: CurrentUser, db: Session = Depends(get_db)) -> Deck:
    deck = get_deck_or_404(deck_id, db)
    ensure_deck_owner(deck, current_user)
    return DeckRepository(db).update(deck, update_deck_request.model_dump(exclude_unset=True))

### DELETE ###

@router.delete("/{deck_id}", response_model=DeckResponse)
async def delete_deck(deck_id: uuid.UUID, current_user: CurrentUser, db: Session = Depends(get_db)) -> Deck:
    deck = get_deck_or_404(deck_id, db)
    ensure_deck_owner(deck, current_user)
    return DeckRepository(db).delete(deck)
