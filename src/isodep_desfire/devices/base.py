import abc


class Device:
    """Abstract base class which uses underlying device communication channel."""

    @abc.abstractmethod
    def transceive(self, bytes: list[int]) -> list[int]:
        """
        Send in APDU request and wait for the response.

        Args:
            bytes (list[int]): Outgoing bytes as list of bytes or byte array

        Raises:
            TransportError: on any I/O fault, including timeouts and user cancellation

        Returns:
            list[int]: List of bytes or byte array from the device.
        """
        raise NotImplementedError("Base class must implement")


class Session:
    """
    Abstract base class for acquiring and releasing access to a card.

    Can be used as a context manager, which guarantees the release on every exit path:

    ```python
    with PCSCSession() as device:
        desfire = DESFire(device)
    ```
    """

    @abc.abstractmethod
    def acquire(self) -> Device:
        """
        Wait for a card and open the link to it.

        Raises:
            TransportError: if no card could be acquired
        """
        raise NotImplementedError("Base class must implement")

    @abc.abstractmethod
    def release(self) -> None:
        """
        Close the link to the card. Must be safe to call repeatedly, and also if `acquire` failed or
        was never called.
        """
        raise NotImplementedError("Base class must implement")

    def __enter__(self) -> Device:
        return self.acquire()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()
