import uuid
from collections.abc import Sequence
from typing import Any

import structlog
from sqlmodel import Session, col, select

from models import Deck, User, utcnow

logger = structlog.get_logger(__name__)

# Fields a deck update is allowed to touch.
MUTABLE_DECK_FIELDS = frozenset({"title", "image"})


class UserRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_username(self, username: str) -> User | None:
        return self.db.exec(select(User).where(User.username == username)).one_or_none()

    def insert(self, username: str, password_hash: str) -> User:
        user = User(username=username, password=password_hash)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("user_created", user_id=user.id)
        return user


class DeckRepository:
    """Storage access for decks. Absence is reported as None; callers decide what that means."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, deck_id: uuid.UUID) -> Deck | None:
        return self.db.get(Deck, deck_id)

    def list(
        self,
        limit: int = 10,
        offset: int = 0,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Sequence[Deck]:
        """
        Return a page of decks ordered by creation time, oldest first.

        Args:
            limit: Maximum number of decks to return
            offset: Number of decks to skip
            search: Case-insensitive substring the title must contain
            owner_id: Only return decks owned by this user

        Returns:
            The matching decks, ties on creation time broken by id
        """
        statement = select(Deck)
        if search:
            statement = statement.where(col(Deck.title).icontains(search, autoescape=True))
        if owner_id is not None:
            statement = statement.where(Deck.user_id == owner_id)
        statement = statement.order_by(col(Deck.created_at), col(Deck.id)).offset(offset).limit(limit)
        return self.db.exec(statement).all()

    def insert(self, data: dict[str, Any], owner_id: int) -> Deck:
        now = utcnow()
        deck = Deck(
            title=data["title"],
            image=data.get("image"),
            user_id=owner_id,
            num_cards=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(deck)
        self.db.commit()
        self.db.refresh(deck)
        logger.info("deck_created", deck_id=str(deck.id), owner_id=owner_id)
        return deck

    def update(self, deck: Deck, patch: dict[str, Any]) -> Deck:
        for field, value in patch.items():
            if field not in MUTABLE_DECK_FIELDS:
                raise ValueError(f"Deck field {field!r} cannot be updated")
            setattr(deck, field, value)
        deck.updated_at = utcnow()
        self.db.add(deck)
        self.db.commit()
        self.db.refresh(deck)
        logger.info("deck_updated", deck_id=str(deck.id), fields=sorted(patch))
        return deck

    def delete(self, deck: Deck) -> Deck:
        # Load every column before the row is gone so the caller can echo it back.
        self.db.refresh(deck)
        self.db.delete(deck)
        self.db.commit()
        logger.info("deck_deleted", deck_id=str(deck.id), owner_id=deck.user_id)
        return deck
