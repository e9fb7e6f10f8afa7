from django.http import JsonResponse


class RetiredEndpointMiddleware:
    """Return 410 for endpoints the dashboard no longer uses."""
    RETIRED_PREFIXES = {
        '/api/family-planning/services': '/api/family-planning/clients',
    }

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        for prefix, replacement in self.RETIRED_PREFIXES.items():
            if path.startswith(prefix):
                return JsonResponse(
                    {'ok': False, 'error': {'code': 'deprecated', 'message': f'This API is retired. Use {replacement} instead.'}},
                    status=410
                )
        return self.get_response(request)
