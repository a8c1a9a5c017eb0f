"""Runtime collaborators: wall clock and cryptographic entropy source."""

from datetime import datetime
from zoneinfo import ZoneInfo

from codegen.shared.utils.datetime import now_in
from codegen.shared.utils.generators import generate_uuid4, random_alphanumeric


class SystemClock:
    """IClock reading the system time in a fixed timezone (codegen_timezone)."""

    def __init__(self, timezone: str = "UTC") -> None:
        self.zone = ZoneInfo(timezone)

    def now(self) -> datetime:
        return now_in(self.zone)


class SecureEntropySource:
    """IEntropySource backed by secrets and uuid4."""

    def random_string(self, length: int) -> str:
        return random_alphanumeric(length)

    def uuid4(self) -> str:
        return generate_uuid4()
