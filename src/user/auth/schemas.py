from pydantic import Field, field_validator

from src.core.schemas import Base
from src.core.validations import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_VALIDATOR,
)


class CreateUserModel(Base):
    name: str = Field(min_length=1, max_length=128)
    username: str
    password: str = Field(
        min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not USERNAME_VALIDATOR.match(value):
            raise ValueError(
                "Username must be from 3 to 60 symbols and contain alphanumeric characters, underscore, dash, and dot"
            )
        return value


class LoginUserModel(Base):
    username: str
    password: str


class TokenRequestModel(Base):
    """Body of the refresh and logout endpoints."""

    token: str
