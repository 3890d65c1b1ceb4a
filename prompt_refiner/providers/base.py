"""Base provider abstraction"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional


class BaseProvider(ABC):
    """Abstract base class for refinement backends"""

    @abstractmethod
    async def refine(self, prompt: str, cancel_event: Optional[asyncio.Event] = None) -> str:
        """
        Refine a prompt using this backend.

        Args:
            prompt: The trimmed, validated prompt text
            cancel_event: Setting it aborts the call like a timeout

        Returns:
            The refined prompt text

        Raises:
            RefinerError: On any failure
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this provider"""
