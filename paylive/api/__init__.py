from .callbacks import CallbackHandler, build_callback_router

__all__ = ["CallbackHandler", "build_callback_router"]
