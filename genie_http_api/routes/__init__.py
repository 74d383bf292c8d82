from .health import router as health_router
from .messages import register_message_routes

__all__ = ["health_router", "register_message_routes"]
