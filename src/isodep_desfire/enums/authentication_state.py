from enum import Enum


class AuthenticationState(Enum):
    """
    States of the two pass DES mutual authentication.

    ```
    IDLE -> AWAITING_CHALLENGE -> CHALLENGE_RECEIVED -> PROOF_SENT -> AUTHENTICATED
                    |                     |                  |
                    +---------------------+------------------+-----> FAILED
    ```
    """

    IDLE = "idle"
    AWAITING_CHALLENGE = "awaiting_challenge"
    CHALLENGE_RECEIVED = "challenge_received"
    PROOF_SENT = "proof_sent"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"
