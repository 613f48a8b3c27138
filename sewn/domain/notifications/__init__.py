from .router import router
from .service import create_notification

__all__ = ["router", "create_notification"]
