from .weidian_api import WeidianAPI

__all__ = ["WeidianAPI"]
