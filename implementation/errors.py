# Error types raised by the compressor and the image codec


class InvalidParameter(ValueError):
    """Bad compression ratio, or a pixel buffer with invalid dimensions/data."""


class DecodeFailure(IOError):
    """Input file could not be decoded as an image."""


class EncodeFailure(IOError):
    """Pixel buffer could not be written in the requested format."""
