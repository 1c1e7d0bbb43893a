"""
Prometheus metrics for the booking directory, assignment workflow and remote API calls.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from lettings_admin.metrics import bookings_listed
    >>> bookings_listed.labels(source="booking_requests").inc(12)
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Directory Metrics
# =============================================================================

bookings_listed = Counter(
    "lettings_bookings_listed_total",
    "Total number of expanded booking rows produced by the booking directory",
    ["source"],
)
"""
Counter for expanded booking rows.

Labels:
    source: Which upstream schema the rows came from (booking_requests, bookings)
"""

booking_source_fallbacks = Counter(
    "lettings_booking_source_fallbacks_total",
    "Times the booking directory skipped a booking source and tried the next one",
    ["source", "reason"],
)
"""
Counter for booking source fallbacks.

Labels:
    source: The source that was skipped
    reason: unavailable (probe said no) or error (query failed)
"""

booking_directory_failures = Counter(
    "lettings_booking_directory_failures_total",
    "Times list_bookings degraded to an empty result",
)

# =============================================================================
# Assignment Metrics
# =============================================================================

assignment_submissions = Counter(
    "lettings_assignment_submissions_total",
    "Property assignment submissions by outcome",
    ["outcome"],
)
"""
Counter for assignment submissions.

Labels:
    outcome: confirmed, validation, already_active, date_conflict, unknown, duplicate
"""

booking_lookups = Counter(
    "lettings_booking_lookups_total",
    "Booking id lookups performed for walk-up assignments",
    ["outcome"],
)
"""
Counter for booking id lookups.

Labels:
    outcome: found, date_not_found, request_missing, error
"""

# =============================================================================
# API Metrics
# =============================================================================

api_requests = Counter(
    "lettings_api_requests_total",
    "Total admin backend API requests made",
    ["endpoint", "status_code"],
)
"""
Counter for API requests to the admin backend.

Labels:
    endpoint: API path (e.g., "api/properties", "api/property-assignment")
    status_code: HTTP status code, or "error" when no response was received
"""

api_latency = Histogram(
    "lettings_api_latency_seconds",
    "Admin backend API request latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)
"""
Histogram for API request latency.

Labels:
    endpoint: API path

Buckets: 0.1s, 0.25s, 0.5s, 1s, 2.5s, 5s, 10s, +Inf
"""

# =============================================================================
# Database Metrics
# =============================================================================

db_query_duration = Histogram(
    "lettings_db_query_duration_seconds",
    "Database query execution time in seconds",
    ["table"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)
"""
Histogram for database read duration.

Labels:
    table: Table the read was issued against
"""
