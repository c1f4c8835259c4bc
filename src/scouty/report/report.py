"""Chat report body."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Report:
    """
    Lines of a chat message.

    Rendered as plain text joined with newlines, or as HTML joined with
    `<br/>`. Short reports drop the lines added with `add_text`.
    """

    def __init__(self, *, is_short: bool = False) -> None:
        self.body: list[str] = []
        self.is_short = is_short

    def add_raw_text(self, text: str) -> None:
        """Append a line that is always shown."""
        self.body.append(text)

    def add_text(self, text: str) -> None:
        """Append a detail line, omitted from short reports."""
        if not self.is_short:
            self.add_raw_text(text)

    def add_break(self) -> None:
        self.add_raw_text("")

    def message(self) -> str:
        return "\n".join(self.body)

    def formatted_message(self) -> str:
        return "<br/>".join(self.body)

    def log(self) -> None:
        """Log every line between start and end markers."""
        logger.info("__START__")
        for line in self.body:
            logger.info("%s", line)
        logger.info("__END__")
