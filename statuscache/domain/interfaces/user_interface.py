"""Interface for operator-facing console output.

Defines the contract for announcing the server at startup and reporting
fatal startup errors, allowing different UI implementations.
"""

import abc
from typing import Any

from statuscache.domain.models.common import ServerConfig


class UserInterface(abc.ABC):
    """Abstract Base Class for operator output."""

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the operator.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_startup_banner(self, config: ServerConfig) -> None:
        """Announces the address being served and the cache directory."""
        pass
