import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenData(BaseModel):
    username: str | None = None

class CreateUserRequest(BaseModel):
    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1, max_length=72)

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str

class CreateDeckRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    image: str | None = None

class UpdateDeckRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    image: str | None = None

    @model_validator(mode="after")
    def title_not_null(self) -> "UpdateDeckRequest":
        # image may be cleared with null, title may not
        if "title" in self.model_fields_set and self.title is None:
            raise ValueError("title cannot be null")
        return self

class DeckResponse(BaseModel):
    """Public view of a deck. The owner id is deliberately absent."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: uuid.UUID
    title: str
    created_at: datetime
    updated_at: datetime
    image: str | None = None
    num_cards: int

class Pagination(BaseModel):
    limit: int
    offset: int

class DeckListResponse(BaseModel):
    filter: str | None = None
    search: str | None = None
    pagination: Pagination
    data: list[DeckResponse]
