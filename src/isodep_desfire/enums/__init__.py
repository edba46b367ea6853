from .authentication_state import AuthenticationState
from .desfire_command import DESFireCommand
from .desfire_communication_mode import DESFireCommunicationMode
from .desfire_keysettings import DESFireKeySettings
from .desfire_status import DESFireStatus
from .transport_error_kind import TransportErrorKind

__all__ = [
    "AuthenticationState",
    "DESFireCommand",
    "DESFireCommunicationMode",
    "DESFireKeySettings",
    "DESFireStatus",
    "TransportErrorKind",
]
