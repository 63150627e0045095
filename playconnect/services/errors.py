"""
Typed failures raised by the participation, invitation and query services.

Every failure carries a stable ``error_code``, the HTTP status the API layer
renders it with, and a user-facing message.
"""

from datetime import timedelta
import math


class PlayConnectError(Exception):
    error_code = "playconnect_error"
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None, **details):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details or None


class EventNotFound(PlayConnectError):
    error_code = "event_not_found"
    status_code = 404
    default_message = "Event does not exist"


class CapacityExceeded(PlayConnectError):
    error_code = "capacity_exceeded"
    status_code = 409
    default_message = "No more places available"


class AlreadyJoined(PlayConnectError):
    error_code = "already_joined"
    status_code = 409
    default_message = "You have already joined this event"


class NotRegistered(PlayConnectError):
    error_code = "not_registered"
    status_code = 409
    default_message = "You are not registered for this event"


NotJoined = NotRegistered


class AlreadyCheckedIn(PlayConnectError):
    error_code = "already_checked_in"
    status_code = 409
    default_message = "You have already checked in"


class CheckInNotYetOpen(PlayConnectError):
    error_code = "checkin_not_open"
    status_code = 409

    def __init__(self, wait: timedelta, window_minutes: int):
        self.wait = wait
        self.minutes_remaining = max(1, math.ceil(wait.total_seconds() / 60))
        super().__init__(
            f"Check-in opens {window_minutes} minutes before the event starts. "
            f"Please try again in {self.minutes_remaining} minutes.",
            minutes_remaining=self.minutes_remaining,
        )


class CheckInClosed(PlayConnectError):
    error_code = "checkin_closed"
    status_code = 409
    default_message = "Check-in closed when the event started"


class InvariantViolation(PlayConnectError):
    error_code = "invariant_violation"
    status_code = 500
    default_message = "Error: No places to decrement"


class InviteNotFound(PlayConnectError):
    error_code = "invite_not_found"
    status_code = 404
    default_message = "Event invite not found"


class InviteNotPending(PlayConnectError):
    error_code = "invite_not_pending"
    status_code = 409
    default_message = "This invite has already been answered"


class NotEventCreator(PlayConnectError):
    error_code = "not_event_creator"
    status_code = 403
    default_message = "Only the event creator can do this"


class UserNotFound(PlayConnectError):
    error_code = "user_not_found"
    status_code = 404
    default_message = "User not found"


class AlreadyInvited(PlayConnectError):
    error_code = "already_invited"
    status_code = 409
    default_message = "This user has already been invited to the event"
