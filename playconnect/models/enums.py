import enum


class ParticipationState(str, enum.Enum):
    NOT_JOINED = "not_joined"
    JOINED = "joined"
    CHECKED_IN = "checked_in"


class InviteStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
