"""
Rental status enumeration.

Defines the lifecycle states of a rental agreement.
"""

import enum


class RentalStatus(str, enum.Enum):
    """
    Rental status enumeration.

    Statuses:
        ONGOING: Car is out with the renter (holds the car unavailable)
        RETURNED: Car came back; releases the car
        CANCELLED: Rental called off; does not release the car
    """
    ONGOING = "ongoing"
    RETURNED = "returned"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not RentalStatus.ONGOING


# Statuses whose cost counts towards revenue
REVENUE_STATUSES = (RentalStatus.ONGOING, RentalStatus.RETURNED)
