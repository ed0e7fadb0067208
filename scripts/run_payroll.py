#!/usr/bin/env python3
"""
Run payroll for one attendance period and close it.

Computes every active employee's payout, persists the results and marks the
period processed, all in one transaction.  A period can be run exactly once;
a second run exits with status 2.

Usage:
    python3 scripts/run_payroll.py --period-id <uuid> [options]

Examples:
    # List periods (newest first) to find the id
    python3 scripts/run_payroll.py --list-periods

    # Run with the default rate derivation (base salary / 173 hours)
    python3 scripts/run_payroll.py --period-id 6f1c...

    # Run with pay settings from YAML
    python3 scripts/run_payroll.py --period-id 6f1c... --config payroll.yaml
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from uuid import UUID, uuid4

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute payroll for a period and mark it processed.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--period-id",
        type=UUID,
        help="Attendance period to process.",
    )
    target.add_argument(
        "--list-periods",
        action="store_true",
        help="Print all periods, newest first, and exit.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with payroll settings (default: built-in defaults).",
    )
    parser.add_argument(
        "--actor-id",
        default=None,
        help="Actor UUID for audit (default: RUN_PAYROLL_ACTOR_ID env or new UUID).",
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Database URL (default: DATABASE_URL env or a local SQLite file).",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before running.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit DEBUG logs (one line per employee).",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    actor_id = (
        UUID(args.actor_id)
        if args.actor_id
        else UUID(os.environ.get("RUN_PAYROLL_ACTOR_ID", str(uuid4())))
    )

    # Lazy imports so we fail fast on args first
    from payroll_kernel.config import PayrollConfig, get_database_url, load_payroll_config
    from payroll_kernel.db.engine import create_tables, get_session, init_engine_from_url
    from payroll_kernel.exceptions import AlreadyProcessedError, PayrollKernelError
    from payroll_kernel.logging_config import configure_logging
    from payroll_kernel.services import PayrollService, PeriodService

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_payroll_config(args.config) if args.config else PayrollConfig()
    except (OSError, ValueError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        return 1

    init_engine_from_url(args.db_url or get_database_url())
    if args.create_tables:
        create_tables()

    session = get_session()
    try:
        if args.list_periods:
            for period in PeriodService(session).list_periods():
                state = "processed" if period.processed else "open"
                print(f"{period.id}  {period.start_date} .. {period.end_date}  {state:9}  {period.name}")
            return 0

        try:
            summary = PayrollService(session, config).compute_and_close(args.period_id, actor_id)
        except PayrollKernelError as e:
            print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
            return 2 if isinstance(e, AlreadyProcessedError) else 1

        print(f"Period {summary.period.name} ({summary.period.start_date} .. {summary.period.end_date}) processed")
        print(f"{'employee':38} {'days':>7} {'base':>15} {'overtime':>13} {'reimb.':>13} {'total':>15}")
        for r in summary.results:
            print(
                f"{str(r.employee_id):38} {r.present_days:>3}/{r.working_days:<3} "
                f"{r.prorated_base:>15,.2f} {r.overtime_pay:>13,.2f} "
                f"{r.reimbursement_total:>13,.2f} {r.total_pay:>15,.2f}"
            )
        if summary.skipped_employee_ids:
            print(f"Skipped (no base salary): {', '.join(str(i) for i in summary.skipped_employee_ids)}")
        print(f"Employees paid: {summary.employee_count}  Total payout: {summary.total_payout:,.2f}")
        return 0
    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
