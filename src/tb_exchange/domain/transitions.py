"""Service request state machine.

    pending --accept--> accepted --complete--> completed
    pending --reject--> rejected
    pending --cancel--> cancelled

completed, rejected and cancelled are terminal.
"""

from src.tb_common.enums import RequestStatus
from src.tb_common.errors import InvalidRequestTransitionError

ACCEPT = "accept"
REJECT = "reject"
CANCEL = "cancel"
COMPLETE = "complete"

_TRANSITIONS: dict[tuple[RequestStatus, str], RequestStatus] = {
    (RequestStatus.PENDING, ACCEPT): RequestStatus.ACCEPTED,
    (RequestStatus.PENDING, REJECT): RequestStatus.REJECTED,
    (RequestStatus.PENDING, CANCEL): RequestStatus.CANCELLED,
    (RequestStatus.ACCEPTED, COMPLETE): RequestStatus.COMPLETED,
}

_PAST_TENSE = {
    ACCEPT: "accepted",
    REJECT: "rejected",
    CANCEL: "cancelled",
    COMPLETE: "completed",
}


def next_status(request_id: str, current: RequestStatus, action: str) -> RequestStatus:
    """Return the status reached by applying action, or raise InvalidRequestTransitionError."""
    try:
        return _TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidRequestTransitionError(
            request_id, current.value, _PAST_TENSE.get(action, action)
        ) from None
