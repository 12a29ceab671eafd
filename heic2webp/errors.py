"""Exception hierarchy.

Fatal errors (ConfigError, NotFoundError) abort a run before any file is
touched. FileConversionError subclasses are per-file and are captured by the
worker into a failed ConversionResult.
"""

from __future__ import annotations


class Heic2WebpError(Exception):
    """Base class for all heic2webp errors."""


class ConfigError(Heic2WebpError, ValueError):
    """Invalid options, config file or command line."""


class NotFoundError(Heic2WebpError, FileNotFoundError):
    """The input path does not exist."""


class FileConversionError(Heic2WebpError):
    kind = "conversion"


class DecodeError(FileConversionError):
    kind = "decode"


class EncodeError(FileConversionError):
    kind = "encode"


class WriteError(FileConversionError):
    kind = "write"
