import logging

from .apdu import exchange, wrap_command
from .auth import DESFireAuthenticator
from .defaults import MAX_WRITE_LENGTH
from .devices.base import Device
from .enums import DESFireCommand, DESFireCommunicationMode
from .exceptions import DESFireCommunicationError, DESFireException
from .key import DESFireKey
from .log import TransactionLog
from .schemas import ApduResponse, FilePermissions, KeySettings
from .util import get_list, le24, to_hex_string

logger = logging.getLogger(__name__)

PICC_LEVEL_AID = [0x00, 0x00, 0x00]


class DESFire:
    """
    This is the main class of this library, facilitating communication with the DESFire card.

    Every command is sent as an ISO 7816-4 wrapped APDU and returns the parsed `ApduResponse`.
    Commands do not raise on fault statuses, inspect `is_success` / `is_complete` or call
    `raise_for_status` on the response.
    """

    is_authenticated: bool = False
    last_selected_application: list[int] | None = None

    def __init__(self, device: Device, log: TransactionLog | None = None):
        """
        Initializes a new DESFire object which can be used to interact with the card.

        Args:
            device (Device): Initialized device object, e.g. a PCSCDevice
            log (TransactionLog | None, optional): Log of the current transaction
        """
        self.device = device
        self.log = log
        logger.info("DESFire object initialized")

    #
    # Internal Methods
    #

    def _communicate(self, command: DESFireCommand, data: list[int] | None = None, label: str | None = None):
        """
        Send a wrapped command and parse the reply.
        """
        response = exchange(self.device, wrap_command(command, data), self.log, label)
        if not response.is_complete:
            logger.debug(f"Command 0x{command.value:02x} returned {response.describe_status()}")
        return response

    @classmethod
    def _aid(cls, aid: list[int] | str | bytearray | bytes) -> list[int]:
        parsed_aid = get_list(aid)
        if len(parsed_aid) != 3:
            raise DESFireException(f"Application ID must be 3 bytes long, got {to_hex_string(parsed_aid)}")
        return parsed_aid

    #
    # Public Methods
    #

    # Authentication

    def authenticate(
        self,
        key: DESFireKey,
        key_number: int = 0x00,
        challenge: list[int] | str | bytearray | bytes | None = None,
    ) -> DESFireAuthenticator:
        """
        Authenticate against the currently selected application with key_number.
        If no application has been selected before, the PICC level application is used.

        Args:
            key (DESFireKey): Key shared with the card.
            key_number (int, optional): Key number to authenticate with. Must be `0x00` on PICC level.
            challenge (list[int] | str | bytearray | bytes | None, optional): Fixed RndA, for tests only.

        Raises:
            DESFireAuthException: If authentication fails
            TransportError: If the card cannot be reached

        Returns:
            DESFireAuthenticator: The finished handshake, in state AUTHENTICATED
        """
        self.is_authenticated = False
        authenticator = DESFireAuthenticator(self.device, key, key_number, log=self.log)
        authenticator.authenticate(challenge)
        self.is_authenticated = authenticator.is_authenticated
        return authenticator

    #
    ## Application related
    #

    def select_picc_level(self) -> ApduResponse:
        """
        Selects the card level application (AID `00 00 00`).
        """
        logger.info("Selecting PICC level application")
        return self.select_application(PICC_LEVEL_AID, label="Select PICC Level App")

    def create_application(self, aid: list[int] | str | bytearray | bytes, key_settings: KeySettings) -> ApduResponse:
        """
        Creates a new application on the card.

        Args:
            aid (list[int] | str | bytearray | bytes): 3 byte application ID. Sent as given,
                a str is parsed as hex, use `text_to_bytes` for an AID made of characters.
            key_settings (KeySettings): Settings of the application master key and the number of keys.
        """
        parsed_aid = self._aid(aid)
        logger.info(f"Executing command: create_application (0x{DESFireCommand.CREATE_APPLICATION.value:02x})")

        # 0xCA + AppID (3 bytes) + key settings (1 byte) + key count (1 byte)
        params = parsed_aid + key_settings.to_list()
        return self._communicate(DESFireCommand.CREATE_APPLICATION, params, "Create App")

    def select_application(self, aid: list[int] | str | bytearray | bytes, label: str = "Select App") -> ApduResponse:
        """
        Choose application on a card on which all the following commands will apply.
        Selecting an application invalidates the current authentication.

        Args:
            aid (list[int] | str | bytearray | bytes): 3 byte application ID.
        """
        parsed_aid = self._aid(aid)
        logger.info(f"Selecting application with ID {to_hex_string(parsed_aid)}")

        response = self._communicate(DESFireCommand.SELECT_APPLICATION, parsed_aid, label)

        self.is_authenticated = False
        if response.is_complete:
            self.last_selected_application = parsed_aid
        return response

    #
    ## File related
    #

    def create_file(
        self,
        file_id: int,
        comm_mode: DESFireCommunicationMode,
        access_rights: FilePermissions | list[int],
        file_size: int,
    ) -> ApduResponse:
        """
        Creates a standard data file in the application currently selected.

        Args:
            file_id (int): ID of the new file.
            comm_mode (DESFireCommunicationMode): Communication mode the card enforces for the file.
            access_rights (FilePermissions | list[int]): Access rights, either as object or as the two raw bytes.
            file_size (int): File size in bytes, only the low 24 bits are sent.
        """
        if isinstance(access_rights, FilePermissions):
            access_bytes = access_rights.get_permissions()
        else:
            access_bytes = get_list(access_rights)
        if len(access_bytes) != 2:
            raise DESFireException("Access rights must be 2 bytes long")

        logger.info(
            f"Executing command: create_file (0x{DESFireCommand.CREATE_STD_DATA_FILE.value:02x}) for file {file_id:x}"
        )

        data = [file_id & 0xFF, comm_mode.value] + access_bytes + le24(file_size)
        return self._communicate(DESFireCommand.CREATE_STD_DATA_FILE, data, "Create File")

    def write_data(self, file_id: int, offset: int, data: list[int] | bytearray | bytes) -> ApduResponse:
        """
        Writes data to the file specified by file_id.

        Args:
            file_id (int): ID of the file to write to.
            offset (int): Offset in the file to write the data to.
            data (list[int] | bytearray | bytes): Data to write.

        !!! warning
            The data must fit into a single frame, at most 42 bytes can be written at once.

        Raises:
            DESFireException: if the data is too long
        """
        payload = get_list(data)
        if len(payload) > MAX_WRITE_LENGTH:
            logger.error(f"Data length exceeds maximum of {MAX_WRITE_LENGTH} bytes")
            raise DESFireException(f"Data length exceeds maximum of {MAX_WRITE_LENGTH} bytes, got {len(payload)}")

        logger.info(f"Executing command: write_data (0x{DESFireCommand.WRITE_DATA.value:02x}) for file {file_id:x}")

        params = [file_id & 0xFF] + le24(offset) + le24(len(payload)) + payload
        return self._communicate(DESFireCommand.WRITE_DATA, params, "Write Data")

    def read_data(self, file_id: int, offset: int = 0, length: int = 0, follow_frames: bool = True) -> ApduResponse:
        """
        Read data from the file specified by file_id.

        Args:
            file_id (int): ID of the file to read.
            offset (int, optional): Offset to start reading at.
            length (int, optional): Number of bytes to read, 0 reads up to the end of the file.
            follow_frames (bool, optional): If the card signals more data (`91 AF`), request the remaining
                frames and concatenate their payloads.

        Raises:
            DESFireCommunicationError: if a continuation frame signals more data but carries none

        Returns:
            ApduResponse: Status word of the last frame and the data read
        """
        logger.info(f"Executing command: read_data (0x{DESFireCommand.READ_DATA.value:02x}) for file {file_id:x}")

        params = [file_id & 0xFF] + le24(offset) + le24(length)
        response = self._communicate(DESFireCommand.READ_DATA, params, "Read Data")

        payload = list(response.payload)
        while follow_frames and response.has_more_frames:
            logger.debug("More data present (indicated by 0xAF), sending continue command")
            response = self._communicate(DESFireCommand.ADDITIONAL_FRAME, label="Read Data (continued)")
            if response.has_more_frames and not response.payload:
                logger.error("Card keeps signalling more frames without sending data")
                raise DESFireCommunicationError("Empty continuation frame", response.status_word)
            payload += response.payload

        logger.debug(f"Total data that has been read: {to_hex_string(payload)}")
        return ApduResponse(response.status_word, payload)
