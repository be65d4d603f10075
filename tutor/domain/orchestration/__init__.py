from .router import Route, route

__all__ = ["Route", "route"]
