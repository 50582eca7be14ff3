"""
Script to print availability for a room type against the configured database

Usage: python check_availability.py <room_type_id> <check_in> <check_out> [YYYY-MM]
"""
import sys

from roomstock.database import SessionLocal
from roomstock.services.availability_calculator import AvailabilityCalculator
from roomstock.services.calendar_expander import CalendarDayExpander
from roomstock.utils.dates import parse_year_month
from roomstock.utils.validation import parse_stay


def main():
    if len(sys.argv) < 4:
        print(__doc__.strip())
        sys.exit(1)

    check = parse_stay(sys.argv[1], sys.argv[2], sys.argv[3])
    db = SessionLocal()

    try:
        print("=" * 50)
        print(f"ROOM TYPE {check.room_type_id}")
        print("=" * 50)

        calculator = AvailabilityCalculator(db)
        snapshot = calculator.inventory.describe(check.room_type_id)
        print(f"\nExists: {snapshot.exists} | Active units: {snapshot.active_units}")

        result = calculator.evaluate(check.room_type_id, check.check_in, check.check_out)
        print(f"\n{check.check_in} -> {check.check_out}")
        print(f"  booked={result.booked_units} available={result.available_units}/{result.total_units}"
              f" limited={result.limited_availability}")

        stays = calculator.overlaps.fetch_overlapping([check.room_type_id], check.check_in, check.check_out)
        print(f"\nBlocking stays: {len(stays)}")
        for stay in stays[:20]:
            print(f"  - {stay.id[:8]}... | {stay.check_in} -> {stay.check_out} | {stay.status}"
                  f" | Unit: {stay.unit_id[:8] + '...' if stay.unit_id else 'unassigned'}")

        if len(sys.argv) > 4:
            year, month = parse_year_month(sys.argv[4])
            days = CalendarDayExpander(db, calculator).expand_month(check.room_type_id, year, month)
            print(f"\nCalendar {year}-{month:02d}")
            for day in days:
                print(f"  {day.date} {day.available_units}/{day.total_units} {day.status.value}")

        print("\n" + "=" * 50)

    finally:
        db.close()


if __name__ == "__main__":
    main()
