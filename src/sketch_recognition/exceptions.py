"""Exception types raised by the sketch recognition package."""


class SketchRecognitionError(Exception):
    """Base class for all sketch recognition errors."""


class DecodeError(SketchRecognitionError):
    """Raised when input bytes are not a valid image."""

    default_message = "Image data could not be decoded"


class TransformError(SketchRecognitionError):
    """Raised when a pixel transform cannot be applied."""

    default_message = "Image transform failed"


class ConfigurationError(SketchRecognitionError):
    """Raised for invalid configuration, taxonomy or backend names."""

    default_message = "Invalid configuration"


class RemoteServiceError(SketchRecognitionError):
    """Raised when a remote recognition API returns an unusable response."""

    default_message = "Remote recognition service error"
