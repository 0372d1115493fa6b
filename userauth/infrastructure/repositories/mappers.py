"""Conversions between MongoDB documents and domain entities.

BSON has no ``date`` type and stores enums as plain strings, so birth dates
are stored as UTC midnight datetimes and enums by value. The document ``_id``
is the entity's uuid4 string id.
"""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict

from userauth.domain.entities import Token, User


def to_bson_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def to_bson_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: to_bson_value(value) for key, value in data.items()}


def user_to_document(user: User) -> Dict[str, Any]:
    document = to_bson_fields(user.model_dump(exclude={"id", "password"}))
    document["_id"] = user.id
    document["password"] = user.password
    return document


def user_from_document(doc: Dict[str, Any], include_password: bool = False) -> User:
    birth_date = doc.get("birth_date")
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()

    return User(
        id=doc["_id"],
        name=doc["name"],
        email=doc["email"],
        username=doc["username"],
        password=doc.get("password") if include_password else None,
        role=doc.get("role", "user"),
        birth_date=birth_date,
        gender=doc.get("gender"),
        is_verified=doc.get("is_verified", False),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )


def token_to_document(token: Token) -> Dict[str, Any]:
    document = to_bson_fields(token.model_dump(exclude={"id"}))
    document["_id"] = token.id
    return document


def token_from_document(doc: Dict[str, Any]) -> Token:
    return Token(
        id=doc["_id"],
        user_id=doc["user_id"],
        token=doc["token"],
        type=doc["type"],
        expires_at=doc["expires_at"],
        is_revoked=doc.get("is_revoked", False),
        created_at=doc["created_at"],
        updated_at=doc["updated_at"],
    )
