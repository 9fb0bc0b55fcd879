"""User-facing notification schema."""

from enum import Enum

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Severity of a notification."""

    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"


class Notification(BaseModel):
    """A fire-and-forget diagnostic shown to the user."""

    type: NotificationType = Field(NotificationType.INFO, description="Severity")
    message: str = Field(..., description="Human-readable message")
