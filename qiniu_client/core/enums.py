from enum import Enum, IntEnum


class StorageType(IntEnum):
    """Storage class of an object."""

    NORMAL = 0
    INFREQUENT = 1
    ARCHIVE = 2
    DEEP_ARCHIVE = 3
    ARCHIVE_IR = 4
    INTELLIGENT_TIERING = 5

    @classmethod
    def parse(cls, code: int) -> "StorageType | int":
        """Map a server code, keeping unknown codes as plain ints."""
        try:
            return cls(code)
        except ValueError:
            return code


class EntryStatus(IntEnum):
    """Availability of an object."""

    ENABLED = 0
    DISABLED = 1

    @classmethod
    def parse(cls, code: int) -> "EntryStatus | int":
        """Map a server code, keeping unknown codes as plain ints."""
        try:
            return cls(code)
        except ValueError:
            return code


class EndpointKind(str, Enum):
    """Region-scoped service endpoints."""

    UP = "up"
    UP_BACKUP = "up_backup"
    IO = "io"
    RS = "rs"
    RSF = "rsf"
    API = "api"
