"""
Errors raised while building a seating plan.

Every error carries the structured fields needed to render a precise message
(branch, counts, room) and can be serialized with to_dict().
"""


class SeatingPlanError(ValueError):
    """Base class for all seating plan failures."""

    kind = 'SeatingPlanError'

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        return {
            'type': self.kind,
            'message': self.message,
            **self.details
        }


class MalformedRequestError(SeatingPlanError):
    """Request body is missing fields or carries invalid values."""

    kind = 'MalformedRequestError'


class SeatingValidationError(SeatingPlanError):
    """Request cannot be satisfied: capacity overflow or too few students."""

    kind = 'ValidationError'

    @classmethod
    def insufficient_students(cls, room, branch, required, available, total):
        return cls(
            f"Not enough students in {branch} branch for room {room}. "
            f"Required: {required}, Available: {available}. "
            f"Total students in {branch}: {total}. "
            f"Please adjust the seating plan.",
            room=room, branch=branch, required=required,
            available=available, total=total
        )

    @classmethod
    def capacity_exceeded(cls, room, requested, capacity):
        return cls(
            f"Room {room} capacity exceeded ({requested}/{capacity})",
            room=room, requested=requested, capacity=capacity
        )


class SeatingIntegrityError(SeatingPlanError):
    """Allocation left seats unfilled even though validation passed."""

    kind = 'IntegrityError'

    def __init__(self, room, shortfall, required):
        # shortfall: branch -> seats that could not be placed
        summary = ', '.join(
            f"{branch} placed {required[branch] - missing}/{required[branch]}"
            for branch, missing in shortfall.items()
        )
        super().__init__(
            f"Room {room} could not seat every requested student without "
            f"placing same-branch students side by side ({summary})",
            room=room,
            shortfall=[
                {
                    'branch': branch,
                    'required': required[branch],
                    'placed': required[branch] - missing,
                }
                for branch, missing in shortfall.items()
            ]
        )
        self.room = room
        self.shortfall = dict(shortfall)
