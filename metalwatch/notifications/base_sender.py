"""Abstract base class for outbound message transports."""

from abc import ABC, abstractmethod


class BaseMessageSender(ABC):
    """Delivers one message body to one address.

    Implementations translate every transport failure into ``DeliveryError``.
    """

    @abstractmethod
    def send(self, body: str, from_: str, to: str) -> str:
        """Send ``body`` from ``from_`` to ``to``.

        Returns:
            The transport's message identifier.

        Raises:
            DeliveryError: The message was not accepted.
        """
        ...
