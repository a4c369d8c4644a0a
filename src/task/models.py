from sqlalchemy import Boolean, ForeignKey, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base
from src.core.database.mixins import IntegerIDMixin, TimestampMixin
from src.core.validations import TASK_NAME_MAX_LENGTH


class Task(Base, IntegerIDMixin, TimestampMixin):
    __tablename__ = "tasks"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(TASK_NAME_MAX_LENGTH))
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_completed: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, user_id={self.user_id}, name={self.name!r})>"
