"""Domain enumerations and state-transition rules."""

import enum


class UserRole(str, enum.Enum):
    TOURIST = "tourist"
    GUIDE = "guide"


class ConnectionStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {ConnectionStatus.ACCEPTED, ConnectionStatus.DECLINED, ConnectionStatus.CANCELLED}
)

# State machine: maps current status -> set of valid next statuses
CONNECTION_TRANSITIONS: dict[ConnectionStatus, set[ConnectionStatus]] = {
    ConnectionStatus.PENDING: {
        ConnectionStatus.ACCEPTED,
        ConnectionStatus.DECLINED,
        ConnectionStatus.CANCELLED,
    },
    ConnectionStatus.ACCEPTED: set(),
    ConnectionStatus.DECLINED: set(),
    ConnectionStatus.CANCELLED: set(),
}

# Which side of the connection may move it into a given status
TRANSITION_ACTORS: dict[ConnectionStatus, UserRole] = {
    ConnectionStatus.ACCEPTED: UserRole.GUIDE,
    ConnectionStatus.DECLINED: UserRole.GUIDE,
    ConnectionStatus.CANCELLED: UserRole.TOURIST,
}

# Legacy input value: "rejected" means decline for the guide, cancel for the tourist
REJECTED_ALIAS = "rejected"


class PlaceCategory(str, enum.Enum):
    MONUMENT = "monument"
    TEMPLE = "temple"
    HERITAGE = "heritage"
    NATURE = "nature"
    WINERY = "winery"
    BEACH = "beach"
    LANDMARK = "landmark"
    SPIRITUAL = "spiritual"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}

# Only the guide confirms; either side may call a booking off
BOOKING_ACTORS: dict[BookingStatus, frozenset[UserRole]] = {
    BookingStatus.CONFIRMED: frozenset({UserRole.GUIDE}),
    BookingStatus.CANCELLED: frozenset({UserRole.GUIDE, UserRole.TOURIST}),
}
