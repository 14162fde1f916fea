"""
Output channels for a finished Up Ahead digest
"""
from abc import ABC, abstractmethod

from core.schemas import UpAheadDigest


class DeliveryChannel(ABC):
    """
    Hands a digest to whatever presents it (files, a web page, ...).
    """

    name: str

    @abstractmethod
    async def deliver(
        self,
        *,
        digest_name: str,
        digest_date: str,
        digest: UpAheadDigest,
    ) -> None:
        """
        Publish one run's digest under digest_name for digest_date.
        Errors propagate; the caller logs them per channel.
        """
        raise NotImplementedError
