"""
Domain exceptions for analytics app.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidDateRangeError
    └── InvalidMetricError

Usage:
    from apps.analytics.exceptions import InvalidMetricError

    if metric not in VALID_METRICS:
        raise InvalidMetricError(f"Invalid metric: {metric}")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    Views catch it to turn any analytics error into a 400:

        try:
            data = ProgramAnalytics.top_installers(metric='invalid')
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidDateRangeError(AnalyticsServiceError):
    """
    Raised when start_date is after end_date.

    Example:
        raise InvalidDateRangeError("Start date must be before end date")
    """

    pass


class InvalidMetricError(AnalyticsServiceError):
    """
    Raised when an invalid ranking metric is specified.

    Valid metrics are: installations, payments, completions.
    """

    pass
