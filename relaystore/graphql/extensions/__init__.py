from .error_handler import CustomErrorHandler

__all__ = ["CustomErrorHandler"]
