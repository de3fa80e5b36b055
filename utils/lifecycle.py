from models import BookingStatus

# Admin buttons: Assign while Pending, Cancel until the booking is terminal.
# Nothing offers Completed.
TRANSITIONS = {
    BookingStatus.PENDING: [BookingStatus.ASSIGNED, BookingStatus.CANCELLED],
    BookingStatus.ASSIGNED: [BookingStatus.CANCELLED],
    BookingStatus.COMPLETED: [],
    BookingStatus.CANCELLED: [],
}

TERMINAL_STATUSES = {BookingStatus.COMPLETED, BookingStatus.CANCELLED}

VIEWS = {
    "upcoming": {BookingStatus.PENDING, BookingStatus.ASSIGNED},
    "past": TERMINAL_STATUSES,
}


def parse_status(value: str) -> BookingStatus:
    """Case-insensitive lookup, raises ValueError for anything else."""
    for status in BookingStatus:
        if status.value.lower() == value.strip().lower():
            return status
    raise ValueError(f"Unknown booking status: {value!r}")


def available_actions(status) -> list:
    try:
        status = parse_status(status)
    except ValueError:
        return []
    return list(TRANSITIONS[status])


def statuses_for(status_filter: str | None = None, view: str | None = None):
    """
    Statuses selected by the admin filter ("all" or one status) and the
    dashboard view ("upcoming" / "past"). None means no restriction.
    Raises ValueError on an unknown filter or view.
    """
    selected = None

    if status_filter and status_filter.strip().lower() != "all":
        selected = {parse_status(status_filter)}

    if view:
        key = view.strip().lower()
        if key not in VIEWS:
            raise ValueError(f"Unknown bookings view: {view!r}")
        selected = VIEWS[key] if selected is None else selected & VIEWS[key]

    return selected
