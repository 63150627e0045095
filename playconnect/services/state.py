"""
Participation and invite state machines.

Each entity has exactly one transition function; an illegal transition raises
the typed failure a caller would see for it.
"""

from playconnect.models.enums import InviteStatus, ParticipationState
from playconnect.services.errors import (
    AlreadyCheckedIn,
    AlreadyJoined,
    InviteNotPending,
    NotRegistered,
)

JOIN = "join"
LEAVE = "leave"
CHECK_IN = "check_in"
ACCEPT = "accept"
DECLINE = "decline"

_PARTICIPATION = {
    (ParticipationState.NOT_JOINED, JOIN): ParticipationState.JOINED,
    (ParticipationState.JOINED, CHECK_IN): ParticipationState.CHECKED_IN,
    (ParticipationState.JOINED, LEAVE): ParticipationState.NOT_JOINED,
    # leaving after check-in stays allowed
    (ParticipationState.CHECKED_IN, LEAVE): ParticipationState.NOT_JOINED,
}

_INVITE = {
    (InviteStatus.PENDING, ACCEPT): InviteStatus.ACCEPTED,
    (InviteStatus.PENDING, DECLINE): InviteStatus.DECLINED,
}


def next_participation_state(current: ParticipationState, action: str) -> ParticipationState:
    try:
        return _PARTICIPATION[(current, action)]
    except KeyError:
        pass
    if action == JOIN:
        raise AlreadyJoined()
    if action == CHECK_IN and current == ParticipationState.CHECKED_IN:
        raise AlreadyCheckedIn()
    if action in (CHECK_IN, LEAVE):
        raise NotRegistered()
    raise ValueError(f"Unknown participation action: {action}")


def next_invite_status(current: InviteStatus, action: str) -> InviteStatus:
    try:
        return _INVITE[(InviteStatus(current), action)]
    except KeyError:
        if action not in (ACCEPT, DECLINE):
            raise ValueError(f"Unknown invite action: {action}")
        raise InviteNotPending(current_status=InviteStatus(current).value)
