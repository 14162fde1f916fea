"""
Contains base class for digest pipelines
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.schemas import UpAheadDigest


class DigestPipeline(ABC):
    """
    Orchestrates ingestion → processing → persistence
    for one digest.
    """

    name: str

    @abstractmethod
    async def run(self) -> Optional[UpAheadDigest]:
        """
        Execute the pipeline and return the digest.
        Must never raise uncaught exceptions.
        """
        raise NotImplementedError
