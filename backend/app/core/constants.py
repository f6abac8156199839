"""
Application constants for Portlink.

Centralizes content limits, table names and Postgres error codes used
across the application.
"""

# Report content limits
REPORT_REASON_MIN_LENGTH = 10
REPORT_REASON_MAX_LENGTH = 500
ADMIN_NOTE_MAX_LENGTH = 1000

# Table names
REPORTS_TABLE = "reports"
POSTS_TABLE = "posts"
USERS_TABLE = "users"

# Post status set when a moderator hides a reported post
POST_STATUS_HIDDEN = "HIDDEN"

# Postgres SQLSTATEs surfaced through PostgREST APIError.code
PG_UNIQUE_VIOLATION = "23505"
PG_INVALID_TEXT_REPRESENTATION = "22P02"  # e.g. malformed uuid in a filter
