from .withholding_routes import router

__all__ = ["router"]
