from .apdu import Apdu, ApduResponse
from .file_permissions import FilePermissions
from .key_settings import KeySettings

__all__ = ["Apdu", "ApduResponse", "FilePermissions", "KeySettings"]
