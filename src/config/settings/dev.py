"""Development settings."""
from .base import *  # noqa: F401,F403

DEBUG = True

# Debug toolbar (installed with the ``dev`` extra)
try:
    import debug_toolbar  # noqa: F401
    INSTALLED_APPS += ["debug_toolbar"]  # noqa: F405
    MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")  # noqa: F405
    INTERNAL_IPS = ["127.0.0.1"]
except ImportError:
    pass

# Local cache, no Redis needed
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Run the leave/attendance sync inline unless a worker is started
CELERY_TASK_ALWAYS_EAGER = env.bool("CELERY_TASK_ALWAYS_EAGER", default=True)  # noqa: F405

# Auth cookies over plain http on localhost
JWT_AUTH_COOKIE_SECURE = False
JWT_RETURN_TOKENS_IN_BODY = env.bool("JWT_RETURN_TOKENS_IN_BODY", default=True)  # noqa: F405

# CORS: the SPA dev server sends cookies cross-origin
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_CREDENTIALS = True

# Logging
LOGGING["root"]["level"] = "DEBUG"  # noqa: F405
