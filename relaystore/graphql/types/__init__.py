# Entity types import the paginator, which imports .common; keep this package
# init limited to the leaf modules so that chain stays acyclic.
from .common import Connection, Edge, OrderDirection, PageInfo
from .user_error import UserError

__all__ = [
    "Connection",
    "Edge",
    "OrderDirection",
    "PageInfo",
    "UserError",
]
