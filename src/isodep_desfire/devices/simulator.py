import logging
from typing import Callable

from Crypto.Random import get_random_bytes

from ..defaults import DEFAULT_MASTER_KEY
from ..enums import DESFireCommand, DESFireStatus, TransportErrorKind
from ..exceptions import DESFireException, TransportError
from ..key import DESFireKey
from ..schemas import FilePermissions
from ..util import get_int, get_list, rotate_left, to_hex_string
from .base import Device, Session

logger = logging.getLogger(__name__)

PICC_LEVEL = (0x00, 0x00, 0x00)

# Maximum payload of a single reply frame before the card switches to 91 AF chaining
MAX_FRAME_PAYLOAD = 59


class SimulatedFile:
    """A standard data file held by the simulated card."""

    def __init__(self, comm_mode: int, permissions: FilePermissions, size: int):
        self.comm_mode = comm_mode
        self.permissions = permissions
        self.data = [0x00] * size

    @property
    def size(self) -> int:
        return len(self.data)


class SimulatedDESFireCard(Device):
    """
    In-memory DESFire EV1 card that answers ISO 7816-4 wrapped native commands.

    Supports SelectApplication, CreateApplication, CreateStdDataFile, WriteData, ReadData and the
    legacy DES authentication. The PICC master key is the only key known to the card and is used for
    authentication on every level.
    """

    def __init__(
        self,
        key: DESFireKey | None = None,
        rnd_b: list[int] | None = None,
        verify_token: bool = True,
        random_source: Callable[[int], bytes | list[int]] = get_random_bytes,
    ):
        """
        Args:
            key (DESFireKey | None, optional): Key stored on the card. Defaults to the all zero master key.
            rnd_b (list[int] | None, optional): Fixed challenge of the card, random if not given.
            verify_token (bool, optional): If disabled, the card skips the RndB' check and always answers
                the second authentication pass with `E(RndA')`, whatever it decrypted.
            random_source (Callable[[int], bytes | list[int]], optional): Source of random RndB values.
        """
        self.key = key or DESFireKey(DEFAULT_MASTER_KEY)
        self.rnd_b = rnd_b
        self.verify_token = verify_token
        self.random_source = random_source

        self.applications: dict[tuple[int, ...], dict[int, SimulatedFile]] = {PICC_LEVEL: {}}
        self.selected: tuple[int, ...] = PICC_LEVEL
        self.authenticated = False
        self.received: list[list[int]] = []

        self._pending_challenge: list[int] | None = None
        self._pending_frames: list[int] | None = None

        self._handlers = {
            DESFireCommand.SELECT_APPLICATION.value: self._select_application,
            DESFireCommand.AUTHENTICATE_LEGACY.value: self._authenticate,
            DESFireCommand.ADDITIONAL_FRAME.value: self._additional_frame,
            DESFireCommand.CREATE_APPLICATION.value: self._create_application,
            DESFireCommand.CREATE_STD_DATA_FILE.value: self._create_file,
            DESFireCommand.WRITE_DATA.value: self._write_data,
            DESFireCommand.READ_DATA.value: self._read_data,
        }

    #
    # Internal Methods
    #

    @classmethod
    def _reply(cls, status: DESFireStatus, payload: list[int] | None = None) -> list[int]:
        return (payload or []) + [0x91, status.value]

    def _file(self, file_id: int) -> SimulatedFile | None:
        return self.applications[self.selected].get(file_id)

    def _may_access(self, access: int, permissions: FilePermissions) -> bool:
        return (
            self.authenticated
            or permissions.is_free(access)
            or permissions.is_free(permissions.read_and_write_access)
        )

    def _select_application(self, data: list[int]) -> list[int]:
        if len(data) != 3:
            return self._reply(DESFireStatus.ST_WrongCommandLen)
        aid = tuple(data)
        if aid not in self.applications:
            return self._reply(DESFireStatus.ST_AppNotFound)
        self.selected = aid
        self.authenticated = False
        return self._reply(DESFireStatus.ST_Success)

    def _authenticate(self, data: list[int]) -> list[int]:
        self.authenticated = False
        if len(data) != 1:
            return self._reply(DESFireStatus.ST_WrongCommandLen)
        if data[0] != 0x00:
            return self._reply(DESFireStatus.ST_KeyDoesNotExist)

        rnd_b = list(self.rnd_b) if self.rnd_b is not None else get_list(bytes(self.random_source(8)))
        self._pending_challenge = rnd_b
        return self._reply(DESFireStatus.ST_MoreFrames, self.key.encrypt(rnd_b))

    def _additional_frame(self, data: list[int]) -> list[int]:
        if self._pending_challenge is not None:
            rnd_b, self._pending_challenge = self._pending_challenge, None
            if len(data) != 16:
                return self._reply(DESFireStatus.ST_WrongCommandLen)

            token = self.key.decrypt(data)
            rnd_a, rnd_b_rot = token[:8], token[8:]
            if self.verify_token and rnd_b_rot != rotate_left(rnd_b):
                logger.debug("Simulated card: RndB' does not match, rejecting authentication")
                return self._reply(DESFireStatus.ST_AuthentError)

            self.authenticated = True
            return self._reply(DESFireStatus.ST_Success, self.key.encrypt(rotate_left(rnd_a)))

        if self._pending_frames is not None:
            return self._next_frame()

        return self._reply(DESFireStatus.ST_IllegalCommand)

    def _next_frame(self) -> list[int]:
        assert self._pending_frames is not None
        chunk, rest = self._pending_frames[:MAX_FRAME_PAYLOAD], self._pending_frames[MAX_FRAME_PAYLOAD:]
        if rest:
            self._pending_frames = rest
            return self._reply(DESFireStatus.ST_MoreFrames, chunk)
        self._pending_frames = None
        return self._reply(DESFireStatus.ST_Success, chunk)

    def _create_application(self, data: list[int]) -> list[int]:
        if self.selected != PICC_LEVEL:
            return self._reply(DESFireStatus.ST_PermissionDenied)
        if len(data) != 5:
            return self._reply(DESFireStatus.ST_WrongCommandLen)
        aid = tuple(data[:3])
        if aid in self.applications:
            return self._reply(DESFireStatus.ST_DuplicateAidFiles)
        if not 1 <= data[4] & 0x0F <= 14:
            return self._reply(DESFireStatus.ST_IncorrectParam)
        self.applications[aid] = {}
        return self._reply(DESFireStatus.ST_Success)

    def _create_file(self, data: list[int]) -> list[int]:
        if self.selected == PICC_LEVEL:
            return self._reply(DESFireStatus.ST_PermissionDenied)
        if len(data) != 7:
            return self._reply(DESFireStatus.ST_WrongCommandLen)
        file_id = data[0]
        if self._file(file_id) is not None:
            return self._reply(DESFireStatus.ST_DuplicateAidFiles)
        permissions = FilePermissions()
        permissions.parse(data[2:4])
        self.applications[self.selected][file_id] = SimulatedFile(data[1], permissions, get_int(data[4:7], "little"))
        return self._reply(DESFireStatus.ST_Success)

    def _write_data(self, data: list[int]) -> list[int]:
        if len(data) < 7:
            return self._reply(DESFireStatus.ST_WrongCommandLen)
        offset = get_int(data[1:4], "little")
        length = get_int(data[4:7], "little")
        payload = data[7:]
        if len(payload) != length:
            return self._reply(DESFireStatus.ST_WrongCommandLen)

        file = self._file(data[0])
        if file is None:
            return self._reply(DESFireStatus.ST_FileNotFound)
        if not self._may_access(file.permissions.write_access, file.permissions):
            return self._reply(DESFireStatus.ST_PermissionDenied)
        if offset + length > file.size:
            return self._reply(DESFireStatus.ST_LimitExceeded)

        file.data[offset : offset + length] = payload
        return self._reply(DESFireStatus.ST_Success)

    def _read_data(self, data: list[int]) -> list[int]:
        if len(data) != 7:
            return self._reply(DESFireStatus.ST_WrongCommandLen)
        offset = get_int(data[1:4], "little")
        length = get_int(data[4:7], "little")

        file = self._file(data[0])
        if file is None:
            return self._reply(DESFireStatus.ST_FileNotFound)
        if not self._may_access(file.permissions.read_access, file.permissions):
            return self._reply(DESFireStatus.ST_PermissionDenied)
        if length == 0:
            length = file.size - offset
        if offset > file.size or offset + length > file.size:
            return self._reply(DESFireStatus.ST_LimitExceeded)

        self._pending_frames = file.data[offset : offset + length]
        return self._next_frame()

    #
    # Public Methods
    #

    def transceive(self, bytes: list[int]) -> list[int]:
        """
        Process one wrapped command APDU and return the reply including the status word.
        """
        command = list(bytes)
        self.received.append(command)
        logger.debug(f"Simulated card received: {to_hex_string(command, ' ')}")

        if len(command) < 5:
            return [0x67, 0x00]  # ISO 7816: wrong length
        if command[0] != 0x90:
            return [0x6E, 0x00]  # ISO 7816: class not supported

        ins = command[1]
        data = command[5 : 5 + command[4]] if len(command) > 5 else []

        # A new command ends any running authentication or chained read
        if ins != DESFireCommand.ADDITIONAL_FRAME.value:
            self._pending_challenge = None
            self._pending_frames = None

        handler = self._handlers.get(ins)
        if handler is None:
            return self._reply(DESFireStatus.ST_IllegalCommand)
        response = handler(data)
        logger.debug(f"Simulated card replies: {to_hex_string(response, ' ')}")
        return response

    def read_file(self, aid: list[int], file_id: int) -> list[int]:
        """
        Returns the content of a file without going through the command interface.
        """
        try:
            return list(self.applications[tuple(aid)][file_id].data)
        except KeyError as ex:
            raise DESFireException(f"No file {file_id} in application {to_hex_string(aid)}") from ex


class SimulatedSession(Session):
    """
    Hands out a simulated card. Without a card, `acquire` fails like a reader that times out
    or, with `cancel` set, like a user aborting the card request.
    """

    def __init__(self, card: SimulatedDESFireCard | None = None, cancel: bool = False):
        self.card = card
        self.cancel = cancel
        self.acquired = False
        self.release_count = 0

    def acquire(self) -> SimulatedDESFireCard:
        if self.cancel:
            raise TransportError("Card request cancelled by the user", TransportErrorKind.USER_CANCEL)
        if self.card is None:
            raise TransportError("No tag detected within the timeout.", TransportErrorKind.TIMEOUT)
        self.acquired = True
        return self.card

    def release(self) -> None:
        self.release_count += 1
        self.acquired = False
