from typing import Literal

from src.core.schemas import Base


class HealthCheckResponse(Base):
    """Only ever `ok`; failures are reported through the error body instead."""

    status: Literal["ok"] = "ok"
