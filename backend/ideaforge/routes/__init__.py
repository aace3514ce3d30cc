from .analyze import router as analyze_router
from .chat import router as chat_router
from .compare import router as compare_router
from .history import router as history_router

__all__ = ["analyze_router", "chat_router", "compare_router", "history_router"]
