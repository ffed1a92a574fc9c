"""
Admin Dashboard Client

Command-line consumer of the admin backend. It downloads the protobuf user
export and verifies every record's signature locally before showing it.

Architecture:
    dashboard → Backend API → Database

The dashboard never touches the database or the server's signing key.
"""
from dashboard.api_client import AdminAPIClient, AdminAPIError
from dashboard.verify import extract_raw_public_key, sha384, verify_record, verify_signature
from dashboard.users import VerifiedUsers, fetch_verified_users, partition_records

__all__ = [
    'AdminAPIClient',
    'AdminAPIError',
    'extract_raw_public_key',
    'sha384',
    'verify_record',
    'verify_signature',
    'VerifiedUsers',
    'fetch_verified_users',
    'partition_records',
]
