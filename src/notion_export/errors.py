"""Exception types raised by the exporter."""


class ExportError(Exception):
    """Base class for all errors the exporter knows how to report."""


class TransportError(ExportError):
    """A remote API call failed (network, HTTP status, or Notion error object)."""


class MalformedDocumentError(ExportError):
    """An object returned by the API lacks a field we depend on."""


class SinkWriteError(ExportError):
    """An output file could not be written."""


class ConfigurationError(ExportError):
    """Required configuration (e.g. the API key) is missing."""
