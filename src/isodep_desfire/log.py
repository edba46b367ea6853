import logging

logger = logging.getLogger(__name__)


class TransactionLog:
    """
    Append-only log of a single card transaction.

    Every entry is numbered and forwarded to the `logging` module, so a host can either render the
    entries of one transaction (e.g. in a log view) or rely on the regular logging configuration.
    Give each transaction its own instance.
    """

    def __init__(self, name: str = "transaction"):
        self.name = name
        self.entries: list[tuple[int, int, str]] = []

    def _append(self, level: int, label: str, *values) -> None:
        message = " ".join([label] + [str(value) for value in values])
        self.entries.append((len(self.entries) + 1, level, message))
        logger.log(level, f"[{self.name}] {message}")

    def info(self, label: str, *values) -> None:
        self._append(logging.INFO, label, *values)

    def warning(self, label: str, *values) -> None:
        self._append(logging.WARNING, label, *values)

    def messages(self, min_level: int = logging.NOTSET) -> list[str]:
        return [message for _, level, message in self.entries if level >= min_level]

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        return "\n".join(f"LOG {index}: {message}" for index, _, message in self.entries)
