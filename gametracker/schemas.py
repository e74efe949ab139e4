"""
Pydantic schemas for request validation.

Field aliases follow the JSON wire format (``gameId``, ``userRating``,
``currentPassword``); attribute names are snake_case. Unknown keys are
rejected.
"""

from typing import Annotated, Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

from .config.library_settings import (
    BIO_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USER_RATING_MAX,
    USER_RATING_MIN,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
)
from .models.game_entry import GameStatus

SchemaT = TypeVar('SchemaT', bound=BaseModel)


def check_password_bytes(value: str) -> str:
    """Reject passwords bcrypt cannot hash once UTF-8 encoded."""
    if len(value.encode('utf-8')) > PASSWORD_MAX_BYTES:
        raise ValueError(f'must be at most {PASSWORD_MAX_BYTES} bytes')
    return value


PasswordText = Annotated[str, AfterValidator(check_password_bytes)]


class RequestSchema(BaseModel):
    """Base for request bodies."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)


# ── Auth ─────────────────────────────────────────────────────────

class RegisterRequest(RequestSchema):
    """Request body for creating an account."""

    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    email: EmailStr
    password: PasswordText = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class LoginRequest(RequestSchema):
    """Request body for logging in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ── Account ──────────────────────────────────────────────────────

class PasswordChangeRequest(RequestSchema):
    """Request body for changing the account password."""

    current_password: str = Field(..., alias='currentPassword', min_length=1)
    new_password: PasswordText = Field(
        ..., alias='newPassword', min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )


class ProfileUpdateRequest(RequestSchema):
    """Request body for editing the public profile."""

    bio: Optional[str] = Field(None, max_length=BIO_MAX_LENGTH)
    favorite_genres: Optional[List[str]] = Field(None, alias='favoriteGenres')


# ── Library ──────────────────────────────────────────────────────

class PlatformRef(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None


class PlatformEntry(BaseModel):
    platform: PlatformRef


class GenreRef(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None


class AddGameRequest(RequestSchema):
    """Request body for adding a catalog game to the library."""

    game_id: int = Field(..., alias='gameId')
    name: str = Field(..., min_length=1)
    background_image: Optional[str] = None
    released: Optional[str] = None
    rating: Optional[float] = None
    platforms: List[PlatformEntry] = Field(default_factory=list)
    genres: List[GenreRef] = Field(default_factory=list)
    status: GameStatus


class UpdateGameRequest(RequestSchema):
    """Partial update of a library entry; only supplied fields are applied."""

    status: Optional[GameStatus] = None
    user_rating: Optional[float] = Field(
        None, alias='userRating', ge=USER_RATING_MIN, le=USER_RATING_MAX
    )
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH)

    @field_validator('status', 'notes', mode='before')
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError('must not be null')
        return value

    def changes(self) -> Dict[str, Any]:
        """Only the fields present in the request body."""
        changes = self.model_dump(exclude_unset=True)
        if 'status' in changes:
            changes['status'] = self.status.value
        return changes


# ── Validation helper ────────────────────────────────────────────

def format_validation_error(error: ValidationError) -> str:
    """Render the first validation error as ``<field>: <reason>``."""
    first = error.errors()[0]
    location = '.'.join(str(part) for part in first.get('loc', ()))
    message = first.get('msg', 'Invalid value')
    return f"{location}: {message}" if location else message


def validate_payload(schema: Type[SchemaT], data: Any) -> Tuple[Optional[SchemaT], Optional[str]]:
    """
    Validate a request body against a schema.

    Returns:
        ``(instance, None)`` on success, ``(None, message)`` on failure
    """
    if not isinstance(data, dict):
        return None, 'Request body is required'
    try:
        return schema.model_validate(data), None
    except ValidationError as error:
        return None, format_validation_error(error)
