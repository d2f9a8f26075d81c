"""Email delivery abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class EmailSender(ABC):
    """Interface for verification email backends."""

    @abstractmethod
    def send(self, to_address: str, subject: str, verification_link: str) -> None:
        """Deliver ``verification_link`` to ``to_address``.

        Raises DeliveryError when the provider rejects or cannot be reached.
        """
