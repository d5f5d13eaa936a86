from __future__ import annotations

from typing import Optional


class PackerError(Exception):
    """Base class for every error raised by the packer."""


class ConfigError(PackerError):
    pass


class ConfigIOError(ConfigError):
    """A config file or pack manifest exists but cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot load {path}: {reason}")
        self.path = path
        self.reason = reason


class FormatError(PackerError):
    """
    Model binary could not be decoded.

    `path` is filled in by the pack walker once the offending file is known;
    the decoder itself only sees bytes.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class SignatureError(FormatError):
    pass


class TruncationError(FormatError):
    pass


class EncodingError(FormatError):
    pass


class FilesystemError(PackerError):
    def __init__(self, code: str, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.code = code  # stable short identifier (e.g. COPY_FAILED)
        self.path = path
