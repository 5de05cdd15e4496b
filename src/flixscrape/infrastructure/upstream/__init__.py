from .site import FlixhqSite

__all__ = ["FlixhqSite"]
