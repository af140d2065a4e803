"""
Error kinds for the Press SYNC gateway.

Collaborators raise these; every public operation catches them and hands
back a structured {"ok": False, "error": ..., "error_kind": ...} dict.
"""
from typing import Any, Dict


class PressSyncError(Exception):
    """Base class. `kind` is the machine-readable name returned to callers."""
    kind = "press_sync_error"

    def to_dict(self, **extra: Any) -> Dict[str, Any]:
        return {"ok": False, "error": str(self), "error_kind": self.kind, **extra}


class ValidationError(PressSyncError):
    kind = "validation_error"


class ConfigurationError(PressSyncError):
    kind = "configuration_error"


class PaymentVerificationError(PressSyncError):
    kind = "payment_verification_error"


class ModerationRejected(PressSyncError):
    kind = "moderation_rejected"


class GatewayUnreachable(PressSyncError):
    kind = "gateway_unreachable"


class NonJSONResponse(PressSyncError):
    kind = "non_json_response"


class NoOpError(PressSyncError):
    """Raised when a write would not change anything."""
    kind = "no_op"
