from schemas.application import (
    AdminNotificationPayload,
    ApplicationStatus,
    ApplicationUpdate,
    ConfirmationPayload,
    StepFields,
)

__all__ = [
    "AdminNotificationPayload",
    "ApplicationStatus",
    "ApplicationUpdate",
    "ConfirmationPayload",
    "StepFields",
]
