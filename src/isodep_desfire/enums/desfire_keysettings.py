from enum import Enum


class DESFireKeySettings(Enum):
    """
    Flags of the key settings byte that is passed to CreateApplication.

    Bits 0-3 are flags, bits 4-7 select the key that is allowed to change other keys of the application.
    """

    # Application master key can be changed, otherwise it is frozen
    KS_ALLOW_CHANGE_MK = 0x01

    # GetFileIDs, GetFileSettings and GetKeySettings do not require master key authentication
    KS_LISTING_WITHOUT_MK = 0x02

    # Files can be created and deleted without master key authentication
    KS_CREATE_DELETE_WITHOUT_MK = 0x04

    # Key settings can still be changed, cleared for good once frozen
    KS_CONFIGURATION_CHANGEABLE = 0x08

    # ------------ BITS 4-7 -------------
    KS_CHANGE_KEY_WITH_MK = 0x00  # A key change requires MK authentication
    KS_CHANGE_KEY_WITH_TARGETED_KEY = 0xE0  # A key change requires authentication with the key to be changed
    KS_CHANGE_KEY_FROZEN = 0xF0  # All keys except the application master key are frozen

    # -------------------------------------
    KS_FACTORY_DEFAULT = 0x0F
