import enum


class GameStatus(enum.Enum):
    UPCOMING = "UPCOMING"
    RELEASED = "RELEASED"
    DELAYED = "DELAYED"
    CANCELED = "CANCELED"
