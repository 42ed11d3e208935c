"""Custom exceptions for the fuel tracker.

Validation, calculation, prediction and store errors all live here
to avoid circular imports between the domain and store modules.
"""

from decimal import Decimal


class FuelTrackError(Exception):
    """Base exception for all fuel tracker errors."""


class ValidationError(FuelTrackError):
    """Raised when a fuel entry violates a write-time invariant."""


class InvalidOdometer(ValidationError):
    """Raised when an odometer reading is zero or negative."""


class InvalidFuelAmount(ValidationError):
    """Raised when a fuel amount is zero or negative.

    Also raised by the calculator when the current collection holds such an
    entry, which means it bypassed write-time validation.
    """


class InvalidFuelPrice(ValidationError):
    """Raised when a fuel price is zero or negative."""


class FutureDate(ValidationError):
    """Raised when a fill-up date lies strictly after the current instant."""


class NonMonotonicOdometer(FuelTrackError):
    """Raised when odometer readings do not strictly increase between fill-ups.

    Covers duplicate readings and a lower reading dated after a higher one.
    Carries the offending adjacent pair (in ascending-odometer order) so the
    caller can point the user at the entries to fix.
    """

    def __init__(
        self,
        previous_id: str,
        previous_odometer: Decimal,
        current_id: str,
        current_odometer: Decimal,
    ) -> None:
        self.previous_id = previous_id
        self.previous_odometer = previous_odometer
        self.current_id = current_id
        self.current_odometer = current_odometer
        super().__init__(
            "Odometer readings must be monotonically increasing: "
            f"entry {current_id} ({current_odometer}) is out of order with "
            f"entry {previous_id} ({previous_odometer})"
        )


class InvalidTankCapacity(FuelTrackError):
    """Raised when a configured tank capacity is zero or negative."""


class EntryNotFoundError(FuelTrackError):
    """Raised when an update or delete targets an unknown entry id."""
