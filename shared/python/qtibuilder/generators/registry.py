"""Generator plugin registry."""

from __future__ import annotations

from qtibuilder.enums import QuestionType
from qtibuilder.generators.base import BaseItemGenerator
from qtibuilder.generators.choice_generator import ChoiceGenerator
from qtibuilder.generators.hottext_generator import HottextGenerator
from qtibuilder.generators.match_generator import MatchGenerator
from qtibuilder.generators.order_generator import OrderGenerator
from qtibuilder.generators.text_entry_generator import TextEntryGenerator


def get_generators() -> dict[QuestionType, BaseItemGenerator]:
    """Return generator map by question type."""

    generators = [
        HottextGenerator(),
        ChoiceGenerator(),
        OrderGenerator(),
        MatchGenerator(),
        TextEntryGenerator(),
    ]
    return {gen.question_type: gen for gen in generators}
