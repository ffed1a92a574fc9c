"""
Dashboard entry point.

Usage:
    python -m dashboard users
    python -m dashboard stats --days 30
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

from backend.core.identity.errors import DecodeError
from dashboard.api_client import AdminAPIClient, AdminAPIError
from dashboard.users import fetch_verified_users

load_dotenv()

logger = logging.getLogger(__name__)


def show_users(client: AdminAPIClient) -> int:
    result = fetch_verified_users(client)

    print(f"{'ID':36}  {'EMAIL':32}  {'ROLE':6}  {'STATUS':8}  CREATED")
    for entry in result.trusted:
        print(f"{entry.id:36}  {entry.email:32}  {entry.role:6}  {entry.status:8}  {entry.created_at}")

    print(f"\n{len(result.trusted)} verified user(s)")
    if result.rejected:
        print(f"{len(result.rejected)} record(s) failed signature verification and were hidden")
    return 0


def show_stats(client: AdminAPIClient, days: int) -> int:
    points = client.users_per_day(days)
    total = sum(point["count"] for point in points)

    print(f"Users registered per day (last {days} days)")
    for point in points:
        print(f"  {point['date']}  {point['count']:5}  {'#' * min(point['count'], 60)}")
    print(f"Total: {total}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Admin dashboard: verified user list and registration stats'
    )
    parser.add_argument('--api-url', type=str, default=None,
                        help='Backend API URL (default: ADMIN_API_URL or http://localhost:4000)')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        help='Logging level (default: WARNING)')

    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('users', help='Download the export and list users whose signatures verify')
    stats_parser = subparsers.add_parser('stats', help='Show users registered per day')
    stats_parser.add_argument('--days', type=int, default=7,
                              help='Number of days including today (1-365, default: 7)')

    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format='%(levelname)s: %(message)s')

    client = AdminAPIClient(base_url=args.api_url)
    try:
        if args.command == 'users':
            return show_users(client)
        return show_stats(client, args.days)
    except (AdminAPIError, DecodeError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
