"""System health checks recorded in the system_health table"""
import logging
import time

from django.db import connection, DatabaseError

from .models import SystemHealth

logger = logging.getLogger(__name__)


def check_database():
    started = time.monotonic()
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
        status, error = 'healthy', None
    except DatabaseError as e:
        logger.error(f"Database health check failed: {str(e)}")
        status, error = 'error', str(e)
    elapsed_ms = round((time.monotonic() - started) * 1000, 2)
    if status == 'healthy' and elapsed_ms > 1000:
        status = 'warning'
    return SystemHealth.objects.create(
        component='database',
        status=status,
        response_time=elapsed_ms,
        error_message=error,
        metadata={'vendor': connection.vendor},
    )


def run_health_checks():
    """Run every check and return the recorded rows"""
    return [check_database()]


def overall_status(records):
    statuses = {r.status for r in records}
    if 'error' in statuses:
        return 'error'
    if 'warning' in statuses:
        return 'warning'
    return 'healthy'
