from ..enums import DESFireKeySettings
from ..exceptions import DESFireException


class KeySettings:
    """
    Key settings for the master key of a new DESFire application.
    """

    def __init__(
        self,
        settings: list[DESFireKeySettings] | None = None,
        max_keys: int = 1,
    ):
        if not 1 <= max_keys <= 14:
            raise DESFireException("Key count must be between 1 and 14.")
        self.settings = settings
        self.max_keys = max_keys

    """
    Array of key settings that are set for the application master key
    """
    settings: list[DESFireKeySettings] | None = None

    """
    Number of DES keys the application can hold
    """
    max_keys: int = 1

    def get_settings(self) -> int:
        """
        Returns the settings as a single byte.
        """
        res = 0

        if not self.settings:
            return res

        for keysetting in self.settings:
            res |= keysetting.value
        return res & 0xFF

    def to_list(self) -> list[int]:
        """
        Returns the two bytes sent with CreateApplication: the settings byte, followed by the
        key count. The upper nibble of the second byte selects the key type, which is zero for DES keys.
        """
        return [self.get_settings(), self.max_keys & 0x0F]

    def human_key_settings(self) -> list[str]:
        """
        Returns a human readable string of the key settings.
        """
        if not self.settings:
            return []

        return [keysetting.name for keysetting in self.settings]

    def __repr__(self) -> str:
        return f"KeySettings(settings={self.human_key_settings()}, max_keys={self.max_keys})"
