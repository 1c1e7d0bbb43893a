import logging
import sys

from lettings_admin.db.engine import engine
from lettings_admin.logging_config import setup_logging
from lettings_admin.services.booking_directory import list_bookings
from lettings_admin.services.filters import BOOKING_FILTERS, FilterSelection, apply_filters

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    """
    Print the expanded booking rows, optionally narrowed to one display status.

    Usage: python scripts/list_bookings.py [status]
    """
    selection = FilterSelection()
    if len(sys.argv) > 1:
        selection = selection.activate("status", sys.argv[1])

    bookings = apply_filters(list_bookings(engine), BOOKING_FILTERS, selection)
    logger.info("Listing %d booking rows", len(bookings))

    for booking in bookings:
        prop = booking.assigned_property.id if booking.assigned_property else "-"
        print(
            f"{booking.id}\t{booking.status}\t{booking.start_date or ''}\t"
            f"{booking.end_date or ''}\t{booking.full_name}\t{prop}"
        )


if __name__ == "__main__":
    main()
