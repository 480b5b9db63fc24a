"""Core middleware."""
from django.conf import settings
from django.utils.cache import add_never_cache_headers


class NoStoreAPIMiddleware:
    """Keep HR data out of browser and proxy caches.

    Every response under ``NO_STORE_PATH_PREFIXES`` (JSON payloads with
    salaries and bank details, CSV/PDF/XLSX report downloads) is marked
    ``private, no-store``.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.prefixes = tuple(getattr(settings, "NO_STORE_PATH_PREFIXES", ("/api/",)))

    def __call__(self, request):
        response = self.get_response(request)
        if self.prefixes and request.path.startswith(self.prefixes):
            add_never_cache_headers(response)
            response["Pragma"] = "no-cache"
        return response
