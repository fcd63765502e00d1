"""Remote backend access."""

from .client import RemoteSchemaClient
from .delegation import EnumLiteral

__all__ = ["EnumLiteral", "RemoteSchemaClient"]
