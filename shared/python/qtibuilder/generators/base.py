"""Base generator interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from qtibuilder.enums import QuestionType
from qtibuilder.schemas import QuestionBase


class BaseItemGenerator(ABC):
    """Generator contract: one question model in, one QTI document out."""

    question_type: QuestionType
    question_model: type[QuestionBase]

    def load(self, data: dict[str, Any]) -> QuestionBase:
        """Build the question model from a camelCase payload."""

        return self.question_model.model_validate(data)

    @abstractmethod
    def generate(self, question: Any) -> str:
        """Serialize a question into a ``qti-assessment-item`` document."""
