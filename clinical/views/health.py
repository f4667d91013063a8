import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)


def health(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        db_ok = bool(row and row[0] == 1)
    except DatabaseError:
        logger.exception('Health check could not reach the database')
        db_ok = False
    return JsonResponse({
        'status': 'OK' if db_ok else 'DEGRADED',
        'message': 'Hospital Management API is running',
        'timestamp': timezone.now().isoformat(),
        'db': db_ok,
    }, status=200 if db_ok else 503)
