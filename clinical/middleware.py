from django.http import JsonResponse


class JsonNotFoundMiddleware:
    """Answer unknown ``/api`` routes with the JSON error envelope."""
    API_PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        path = request.path or ''
        if (
            response.status_code == 404
            and path.startswith(self.API_PREFIX)
            and 'application/json' not in response.get('Content-Type', '')
        ):
            return JsonResponse({'success': False, 'message': f'Route {path} not found'}, status=404)
        return response
