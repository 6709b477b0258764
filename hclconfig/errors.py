"""
Error kinds raised by hclconfig.

Every error carries the offending address or name so callers can report it
verbatim.
"""
from typing import Optional


class ConfigError(Exception):
    """Base class for all hclconfig errors."""


class MalformedAddressError(ConfigError):
    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"malformed address '{address}': {reason}")


class UnknownTypeError(ConfigError):
    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"resource type '{type_name}' is not registered")


class DuplicateResourceError(ConfigError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"resource '{address}' already exists")


class ResourceNotFoundError(ConfigError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"resource '{address}' not found")


class UnsupportedSignatureError(ConfigError):
    def __init__(self, function_name: str, reason: str):
        self.function_name = function_name
        self.reason = reason
        super().__init__(f"function '{function_name}' has an unsupported signature: {reason}")


class ParserError(ConfigError):
    def __init__(self, filepath: str, reason: str, line: Optional[int] = None):
        self.filepath = filepath
        self.reason = reason
        self.line = line
        where = f"{filepath}:{line}" if line else filepath
        super().__init__(f"unable to parse {where}: {reason}")


class FetchError(ConfigError):
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"unable to fetch module '{source}': {reason}")
