"""Logger wrapper that counts warnings and reports the outcome of a build."""

import logging

logger = logging.getLogger("symdoc")


class BuildLogger:
    """Routes build messages to :mod:`logging` and keeps a warning tally."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        """Wrap ``log`` (defaults to the ``symdoc`` logger)."""
        self.log = log or logger
        self.warning_count = 0

    def info(self, message: str, *args: object) -> None:
        """Log an informational message."""
        self.log.info(message, *args)

    def warn(self, message: str, *args: object) -> None:
        """Log a warning and count it towards the run summary."""
        self.log.warning(message, *args)
        self.warning_count += 1

    def error(self, message: str, *args: object) -> None:
        """Log an error."""
        self.log.error(message, *args)

    def report(self) -> str:
        """Log and return the run summary line."""
        if self.warning_count > 0:
            summary = f"Generation completed with {self.warning_count} warnings"
        else:
            summary = "Generation completed successfully"
        self.log.info(summary)
        return summary
