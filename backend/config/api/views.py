"""
API views (non-viewset endpoints).
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from django.db import connection


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
        200 OK if database and cache are reachable
        503 Service Unavailable otherwise
    """
    from infrastructure.bootstrap import get_container
    from infrastructure.cache import Cache
    from services.storefront import Storefront

    health = {
        'status': 'healthy',
        'checks': {}
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        health['checks']['database'] = 'ok'
    except Exception as e:
        health['status'] = 'unhealthy'
        health['checks']['database'] = str(e)

    container = get_container()

    # The claim queues live in the cache, so it is not optional here
    try:
        cache = container.get(Cache)
        cache.set('health_check', 'ok', ttl=10)
        if cache.get('health_check') == 'ok':
            health['checks']['cache'] = 'ok'
        else:
            health['status'] = 'unhealthy'
            health['checks']['cache'] = 'read failed'
    except Exception as e:
        health['status'] = 'unhealthy'
        health['checks']['cache'] = f'error: {e}'

    storefront = container.get(Storefront)
    health['checks']['storefront'] = 'ok' if storefront.is_configured() else 'not configured'

    status_code = 200 if health['status'] == 'healthy' else 503
    return Response(health, status=status_code)
