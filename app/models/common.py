import enum

# enums
class ChurchStatus(enum.IntEnum):
    INACTIVE = 0
    ACTIVE = 1
    PENDING = 2

class RecordStatus(enum.IntEnum):
    """Status of servants and locations on a church roster."""
    INACTIVE = 0
    ACTIVE = 1

class ServiceStatus(enum.IntEnum):
    PUBLISHED = 1
    PENDING_PUBLISH = 2
