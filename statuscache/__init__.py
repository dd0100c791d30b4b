"""statuscache: an HTTP-addressable file cache for three-digit status-code images."""

__version__ = "1.0.0"
