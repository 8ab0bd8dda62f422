"""Domain layer: errors and schemas."""

from .errors import ErrorCodes, IntakeError
from .schemas import (
    ContactData,
    DeliveryLog,
    QuestionnaireRecord,
    QuestionnaireType,
)

__all__ = [
    "IntakeError",
    "ErrorCodes",
    "ContactData",
    "DeliveryLog",
    "QuestionnaireRecord",
    "QuestionnaireType",
]
