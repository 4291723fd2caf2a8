"""Pod log line model and parser."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

# Timestamp followed by a space and the log text. Tried in order.
LOCAL_OFFSET_LINE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}[A-Z]\d{2}:\d{2}:\d{2}\.\d{1,12}[+-]\d{2}:\d{2}) (.*)$"
)
ZONE_LETTER_LINE = re.compile(r"^(\d{4}-\d{2}-\d{2}[A-Z]\d{2}:\d{2}:\d{2}\.\d{1,12}[A-Z]) (.*)$")

LOG_LINE_PATTERNS = (LOCAL_OFFSET_LINE, ZONE_LETTER_LINE)


class LogEntry(BaseModel):
    """A single pod log line split into its timestamp and text.

    ``timestamp`` is None when the line carries no recognizable timestamp.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: str | None = None
    message: str

    @classmethod
    def parse(cls, line: str) -> LogEntry:
        for pattern in LOG_LINE_PATTERNS:
            if match := pattern.match(line):
                return cls(timestamp=match.group(1), message=match.group(2))
        return cls(timestamp=None, message=line)
