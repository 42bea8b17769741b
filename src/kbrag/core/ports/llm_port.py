"""Answer Generation Port Interface."""

from abc import ABC, abstractmethod


class GenerationPort(ABC):
    """Abstract interface for answer generation providers."""

    @abstractmethod
    def generate(self, system_instruction: str, user_prompt: str) -> str:
        """Generate an answer for ``user_prompt`` under ``system_instruction``.

        Raises:
            GenerationError: On any upstream failure. Implementations must not
                return placeholder text in place of an error.
        """
        ...
