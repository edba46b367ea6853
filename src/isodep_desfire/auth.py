import hmac
import logging
from typing import Callable

from Crypto.Random import get_random_bytes

from .apdu import exchange, wrap_command
from .crypto import BLOCK_SIZE
from .devices.base import Device
from .enums import AuthenticationState, DESFireCommand, TransportErrorKind
from .exceptions import (
    AuthenticationMismatchError,
    AuthenticationRejectedError,
    DecryptionError,
    DESFireException,
    TransportError,
)
from .key import DESFireKey
from .log import TransactionLog
from .util import get_list, rotate_left, rotate_right, to_hex_string

logger = logging.getLogger(__name__)


class DESFireAuthenticator:
    """
    Two pass DES mutual authentication (legacy `0x0A` / `0xAF` handshake) against the currently selected application.

    ```
    PCD                                   PICC
     | -- 0A <key no> ------------------> |
     | <------------------ E(RndB) 91AF - |
     | -- AF E(RndA || rotl(RndB)) -----> |
     | <----------- E(rotl(RndA)) 9100 -- |
    ```

    One instance covers exactly one authentication attempt. A failed attempt is terminal, call `reset`
    to start over with a fresh RndA.
    """

    state: AuthenticationState = AuthenticationState.IDLE
    failure: DESFireException | None = None

    def __init__(
        self,
        device: Device,
        key: DESFireKey,
        key_number: int = 0x00,
        random_source: Callable[[int], bytes | list[int]] = get_random_bytes,
        log: TransactionLog | None = None,
    ):
        """
        Args:
            device (Device): Transport to the card.
            key (DESFireKey): Shared key, must match the key `key_number` stored on the card.
            key_number (int, optional): Number of the key to authenticate with.
            random_source (Callable[[int], bytes | list[int]], optional): Source of RndA, must be
                cryptographically secure for real key material.
            log (TransactionLog | None, optional): Transaction log receiving the handshake steps.
        """
        self.device = device
        self.key = key
        self.key_number = key_number
        self.random_source = random_source
        self.log = log
        self.reset()

    def reset(self):
        """
        Discards all challenges of the previous attempt and returns to IDLE.
        """
        self.state = AuthenticationState.IDLE
        self.failure = None
        self._rnd_a: list[int] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthenticationState.AUTHENTICATED

    def _expect(self, state: AuthenticationState):
        if self.state != state:
            raise DESFireException(f"Authentication step requires state {state.name}, current state is {self.state.name}")

    def _fail(self, ex: DESFireException) -> DESFireException:
        logger.warning(f"Authentication failed in state {self.state.name}: {ex}")
        if self.log is not None:
            self.log.warning("Authentication failed", str(ex))
        self.state = AuthenticationState.FAILED
        self.failure = ex
        return ex

    def _trace(self, label: str, data: list[int]):
        logger.debug(f"Encryption: {label}: {to_hex_string(data)}")
        if self.log is not None:
            self.log.info(label, to_hex_string(data))

    def _exchange(self, command: DESFireCommand, data: list[int], label: str):
        try:
            return exchange(self.device, wrap_command(command, data), self.log, label)
        except TransportError as ex:
            if ex.kind == TransportErrorKind.TIMEOUT:
                logger.warning("Card did not answer within the timeout during authentication")
            raise self._fail(ex)
        except DESFireException as ex:
            raise self._fail(ex)

    def request_challenge(self) -> list[int]:
        """
        First pass: ask the card for its encrypted challenge.

        Raises:
            AuthenticationRejectedError: if the card does not answer with `91 AF`

        Returns:
            list[int]: The encrypted RndB as sent by the card
        """
        self._expect(AuthenticationState.IDLE)
        logger.info(f"Executing command: authenticate (0x{DESFireCommand.AUTHENTICATE_LEGACY.value:02x})")
        self.state = AuthenticationState.AWAITING_CHALLENGE

        response = self._exchange(DESFireCommand.AUTHENTICATE_LEGACY, [self.key_number], "Authenticate 1")
        if not response.has_more_frames:
            raise self._fail(
                AuthenticationRejectedError(
                    f"Card refused the authentication request: {response.describe_status()}", response.status_word
                )
            )

        self._trace("Random B (enc)", response.payload)
        return response.payload

    def answer_challenge(
        self, rnd_b_enc: list[int], challenge: list[int] | str | bytearray | bytes | None = None
    ) -> list[int]:
        """
        Decrypts RndB, draws RndA and computes the token E(RndA || RndB').

        Args:
            rnd_b_enc (list[int]): Encrypted RndB received from the card.
            challenge (list[int] | str | bytearray | bytes | None, optional): Fixed RndA. It is not recommended
                to provide one outside of tests.

        Raises:
            DecryptionError: if RndB is not a single 8 byte block

        Returns:
            list[int]: 16 byte token to send to the card
        """
        self._expect(AuthenticationState.AWAITING_CHALLENGE)

        if len(rnd_b_enc) != BLOCK_SIZE:
            raise self._fail(DecryptionError(f"Expected an {BLOCK_SIZE} byte challenge, got {len(rnd_b_enc)} bytes"))
        rnd_b = self.key.decrypt(rnd_b_enc)
        self.state = AuthenticationState.CHALLENGE_RECEIVED
        self._trace("Random B (dec)", rnd_b)

        rnd_b_rot = rotate_left(rnd_b)
        self._trace("Random B (dec, rot)", rnd_b_rot)

        # Challenge can be either provided externally, or generated randomly
        if challenge is not None:
            rnd_a = get_list(challenge)
        else:
            rnd_a = get_list(bytes(self.random_source(BLOCK_SIZE)))
        if len(rnd_a) != BLOCK_SIZE:
            raise self._fail(DESFireException(f"RndA must be {BLOCK_SIZE} bytes long, got {len(rnd_a)}"))
        self._rnd_a = rnd_a
        self._trace("Random A", rnd_a)

        token = self.key.encrypt(rnd_a + rnd_b_rot)
        self._trace("Random AB (enc)", token)
        return token

    def send_proof(self, token: list[int]) -> list[int]:
        """
        Second pass: send the token, the card answers with E(RndA') if it accepted RndB'.

        Raises:
            AuthenticationRejectedError: if the card answers with anything but `91 00`

        Returns:
            list[int]: The encrypted RndA' as sent by the card
        """
        self._expect(AuthenticationState.CHALLENGE_RECEIVED)
        self.state = AuthenticationState.PROOF_SENT

        response = self._exchange(DESFireCommand.ADDITIONAL_FRAME, token, "Authenticate 2")
        if not response.is_complete:
            raise self._fail(
                AuthenticationRejectedError(f"Card rejected the token: {response.describe_status()}", response.status_word)
            )

        self._trace("Random A (enc)", response.payload)
        return response.payload

    def verify(self, rnd_a_enc: list[int]) -> bool:
        """
        Checks that the card returned our RndA rotated by one byte, proving it holds the same key.

        Raises:
            AuthenticationMismatchError: if the returned value does not match RndA
        """
        self._expect(AuthenticationState.PROOF_SENT)
        assert self._rnd_a is not None

        if len(rnd_a_enc) != BLOCK_SIZE:
            raise self._fail(AuthenticationMismatchError(f"Expected an {BLOCK_SIZE} byte RndA', got {len(rnd_a_enc)}"))

        rnd_a_dec = self.key.decrypt(rnd_a_enc)
        self._trace("Random A (dec)", rnd_a_dec)
        rnd_a_rot = rotate_right(rnd_a_dec)
        self._trace("Random A (dec, rot)", rnd_a_rot)

        if not hmac.compare_digest(bytes(rnd_a_rot), bytes(self._rnd_a)):
            raise self._fail(AuthenticationMismatchError("Authentication FAILED!"))

        self.state = AuthenticationState.AUTHENTICATED
        logger.info("Authentication successful")
        if self.log is not None:
            self.log.info("AUTHEN SUCCESS")
        return True

    def authenticate(self, challenge: list[int] | str | bytearray | bytes | None = None) -> bool:
        """
        Runs the complete handshake.

        Args:
            challenge (list[int] | str | bytearray | bytes | None, optional): Fixed RndA, see `answer_challenge`.

        Raises:
            TransportError: if the card could not be reached
            DecryptionError: if the challenge of the card cannot be deciphered
            AuthenticationRejectedError: if the card answers with a fault status
            AuthenticationMismatchError: if the card does not prove knowledge of the key

        Returns:
            bool: True, failures are raised
        """
        rnd_b_enc = self.request_challenge()
        token = self.answer_challenge(rnd_b_enc, challenge)
        rnd_a_enc = self.send_proof(token)
        return self.verify(rnd_a_enc)
