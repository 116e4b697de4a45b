"""
Mail Dispatcher Interface
"""

from abc import abstractmethod
from typing import Any, Protocol


class IMailDispatcher(Protocol):
    """Delivers templated messages out of band."""

    @abstractmethod
    async def send(self, to: str, template_id: str, context: dict[str, Any]) -> None:
        """
        Render ``template_id`` with ``context`` and deliver it to ``to``.

        Raises:
            DeliveryFailedError: If the message could not be handed off
        """
        ...
