from pydantic import Field, field_validator

from src.core.schemas import Base
from src.core.validations import TASK_NAME_MAX_LENGTH


class TaskCreateModel(Base):
    name: str = Field(min_length=1, max_length=TASK_NAME_MAX_LENGTH)
    priority: int | None = None
    is_completed: bool = False


class TaskUpdateModel(Base):
    name: str | None = Field(None, min_length=1, max_length=TASK_NAME_MAX_LENGTH)
    priority: int | None = None
    is_completed: bool | None = None

    @field_validator("name", "is_completed")
    @classmethod
    def reject_null(cls, value: object) -> object:
        # only priority may be cleared
        if value is None:
            raise ValueError("must not be null")
        return value


class TaskViewModel(Base):
    id: int
    name: str
    priority: int | None
    is_completed: bool


class TaskCreatedResponse(Base):
    message: str = "Task created"
    id: int


class TaskChangedResponse(Base):
    message: str
    rows: int
