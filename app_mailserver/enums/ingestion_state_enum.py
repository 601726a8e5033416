from enum import Enum


class IngestionStateEnum(Enum):
    CONNECTED = 0
    RECIPIENT_ACCEPTED = 1
    RECEIVING = 2
    COMMITTED = 3
    REJECTED = 4

    def is_final(self) -> bool:
        return self in (IngestionStateEnum.COMMITTED, IngestionStateEnum.REJECTED)
