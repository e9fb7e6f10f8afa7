"""
ASGI entry point: plain Django for HTTP, Channels for the dashboard's
``ws/updates/`` socket.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "healthadmin.settings")

from django.core.asgi import get_asgi_application  # noqa: E402

# the app registry must be ready before consumers import models
http_app = get_asgi_application()

from channels.auth import AuthMiddlewareStack  # noqa: E402
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402

from records.realtime.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter({
    "http": http_app,
    "websocket": AuthMiddlewareStack(URLRouter(websocket_urlpatterns)),
})
