"""
Pydantic models for the users listing and its normalizer.
Why: the cache only ever stores records of a known shape.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ParseError


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    name: str
    user_name: str = Field(default="", alias="userName")


class UsersContent(BaseModel):
    data: List[User] = []


def to_user(item: Any) -> User:
    if not isinstance(item, dict):
        raise ParseError(item)
    # jsonplaceholder spells it "username"
    if "userName" not in item and "username" in item:
        item = {**item, "userName": item["username"]}
    try:
        return User.model_validate(item)
    except ValidationError as exc:
        raise ParseError(item) from exc


def to_users_content(payload: Any) -> UsersContent:
    """Normalize a decoded ``GET /users`` body into ``UsersContent``.

    Accepts either a bare list of user objects or an envelope of the form
    ``{"data": [...]}``.
    """
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        raise ParseError(payload)
    return UsersContent(data=[to_user(item) for item in payload])
