"""
Default values of the demo record: the factory master key, the application and file the record lives in
and the record itself. Real deployments pass their own values to the functions in `transaction`.
"""

from .enums import DESFireCommunicationMode, DESFireKeySettings

# 16 bytes, factory default DES master key
DEFAULT_MASTER_KEY = [0x00] * 16
DEFAULT_KEY_NUMBER = 0x00

# 3 bytes, the text "STA"
DEFAULT_AID = [0x53, 0x54, 0x41]
DEFAULT_KEY_SETTINGS = [DESFireKeySettings.KS_FACTORY_DEFAULT]
DEFAULT_KEY_COUNT = 1

DEFAULT_FILE_ID = 0x01
# 2=plain text, 3 is requested for better security
DEFAULT_COMMUNICATION_MODE = DESFireCommunicationMode.ENCRYPTED
DEFAULT_ACCESS_RIGHTS = [0xEE, 0xEE]

DEFAULT_DATA = "EAL MKK 3 UE"
MAX_WRITE_LENGTH = 42

# Seconds to wait for a tag to be presented
CARD_REQUEST_TIMEOUT = 30
