"""Parser registry."""

from collections.abc import Callable

from qtibuilder.enums import QuestionType
from qtibuilder.parsers.choice_parser import parse_choice_xml
from qtibuilder.parsers.hottext_parser import parse_hottext_xml
from qtibuilder.parsers.match_parser import parse_match_xml
from qtibuilder.parsers.order_parser import parse_order_xml
from qtibuilder.parsers.text_entry_parser import parse_text_entry_xml
from qtibuilder.schemas import Question

Parser = Callable[..., Question | None]


def get_parsers() -> dict[QuestionType, Parser]:
    return {
        QuestionType.HOTTEXT: parse_hottext_xml,
        QuestionType.CHOICE: parse_choice_xml,
        QuestionType.ORDER: parse_order_xml,
        QuestionType.MATCH: parse_match_xml,
        QuestionType.TEXT_ENTRY: parse_text_entry_xml,
    }
