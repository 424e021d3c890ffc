"""Service-level registry wrapper for generators and parsers."""

from qtibuilder.enums import QuestionType
from qtibuilder.generators.base import BaseItemGenerator
from qtibuilder.generators.registry import get_generators as get_shared_generators
from qtibuilder.parsers.registry import Parser
from qtibuilder.parsers.registry import get_parsers as get_shared_parsers


def get_generators() -> dict[QuestionType, BaseItemGenerator]:
    """Return available generators for the builder service."""

    return get_shared_generators()


def get_parsers() -> dict[QuestionType, Parser]:
    """Return available parsers for the builder service."""

    return get_shared_parsers()
