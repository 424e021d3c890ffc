from qtibuilder.enums import BlockType, HottextContentType, Orientation
from qtibuilder.generators.choice_generator import generate_choice_xml
from qtibuilder.generators.hottext_generator import generate_hottext_xml
from qtibuilder.generators.match_generator import generate_match_xml
from qtibuilder.generators.order_generator import generate_order_xml
from qtibuilder.generators.text_entry_generator import generate_text_entry_xml
from qtibuilder.parsers.choice_parser import parse_choice_xml
from qtibuilder.parsers.hottext_parser import parse_hottext_xml
from qtibuilder.parsers.match_parser import parse_match_xml
from qtibuilder.parsers.order_parser import parse_order_xml
from qtibuilder.parsers.registry import get_parsers
from qtibuilder.parsers.text_entry_parser import parse_text_entry_xml
from qtibuilder.schemas import (
    ContentBlock,
    HottextContent,
    HottextItem,
    HottextQuestion,
    MatchPair,
    MatchQuestion,
    MultipleChoiceOption,
    MultipleChoiceQuestion,
    OrderOption,
    OrderQuestion,
    TextEntryQuestion,
)

QTI_NS = "http://www.imsglobal.org/xsd/imsqtiasi_v3p0"


def _text(content: str, **styles: str) -> ContentBlock:
    return ContentBlock(type=BlockType.TEXT, content=content, styles=styles)


def _item(body: str, correct: str = "", identifier: str = "doc-1") -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<qti-assessment-item xmlns="{QTI_NS}" identifier="{identifier}" title="Imported">
  <qti-response-declaration identifier="RESPONSE" cardinality="ordered" base-type="identifier">
    <qti-correct-response>{correct}</qti-correct-response>
  </qti-response-declaration>
  <qti-item-body>{body}</qti-item-body>
</qti-assessment-item>"""


def _order_question() -> OrderQuestion:
    return OrderQuestion(
        identifier="order-7",
        title="Launch sequence",
        prompt_blocks=[_text("<p>Order the steps</p>", fontSize="18px")],
        options=[
            OrderOption(identifier="B", content_blocks=[_text("Ignite")], correct_order=2),
            OrderOption(identifier="A", content_blocks=[_text("Fuel")], correct_order=1),
            OrderOption(
                identifier="C",
                content_blocks=[ContentBlock(type=BlockType.IMAGE, content="liftoff.png")],
                correct_order=3,
            ),
        ],
        correct_feedback_blocks=[_text("Correct!")],
        shuffle=True,
        orientation=Orientation.HORIZONTAL,
    )


def test_order_round_trip() -> None:
    original = _order_question()
    parsed = parse_order_xml(generate_order_xml(original))

    assert parsed is not None
    assert parsed.identifier == "order-7"
    assert parsed.title == "Launch sequence"
    assert [(option.identifier, option.correct_order) for option in parsed.options] == [
        ("A", 1),
        ("B", 2),
        ("C", 3),
    ]
    assert parsed.shuffle is True
    assert parsed.orientation == Orientation.HORIZONTAL
    assert parsed.prompt_blocks[0].content == "<p>Order the steps</p>"
    assert parsed.prompt_blocks[0].styles == {"fontSize": "18px"}
    image = parsed.options[2].content_blocks[0]
    assert image.type == BlockType.IMAGE
    assert image.content == "liftoff.png"
    assert image.styles == {"maxWidth": "100%"}
    assert parsed.correct_feedback_blocks[0].content == "Correct!"
    assert parsed.incorrect_feedback_blocks == []


def test_order_falls_back_to_document_order() -> None:
    body = (
        '<qti-order-interaction response-identifier="RESPONSE">'
        '<qti-simple-choice identifier="x"><div>one</div></qti-simple-choice>'
        '<qti-simple-choice identifier="y"><div>two</div></qti-simple-choice>'
        "<qti-simple-choice><div>three</div></qti-simple-choice>"
        "</qti-order-interaction>"
    )
    parsed = parse_order_xml(_item(body))
    assert parsed is not None
    assert [(option.identifier, option.correct_order) for option in parsed.options] == [
        ("x", 1),
        ("y", 2),
        ("option_3", 3),
    ]


def test_order_strict_mode_rejects_fallback_and_dangling_values() -> None:
    body = (
        '<qti-order-interaction response-identifier="RESPONSE">'
        '<qti-simple-choice identifier="x"><div>one</div></qti-simple-choice>'
        "</qti-order-interaction>"
    )
    assert parse_order_xml(_item(body), strict=True) is None
    assert parse_order_xml(_item(body, "<qti-value>x</qti-value><qti-value>ghost</qti-value>"), strict=True) is None

    lenient = parse_order_xml(_item(body, "<qti-value>x</qti-value><qti-value>ghost</qti-value>"))
    assert [option.identifier for option in lenient.options] == ["x"]


def test_order_missing_metadata_uses_defaults() -> None:
    xml = f"""<qti-assessment-item xmlns="{QTI_NS}">
  <qti-item-body><qti-order-interaction/></qti-item-body>
</qti-assessment-item>"""
    parsed = parse_order_xml(xml)
    assert parsed is not None
    assert parsed.identifier.startswith("order-question-")
    assert parsed.title == "Untitled Order Question"
    assert parsed.options == []


def _match_question() -> MatchQuestion:
    return MatchQuestion(
        identifier="match-3",
        title="Capitals",
        prompt_blocks=[_text("Match each country")],
        pairs=[
            MatchPair(left_id="L1", left_content_blocks=[_text("France")], right_id="R1", right_content_blocks=[_text("Paris")]),
            MatchPair(left_id="L2", left_content_blocks=[_text("Spain")], right_id="R2", right_content_blocks=[_text("Madrid")]),
        ],
        max_associations=2,
    )


def test_match_round_trip() -> None:
    parsed = parse_match_xml(generate_match_xml(_match_question()))
    assert parsed is not None
    assert parsed.identifier == "match-3"
    assert [(pair.left_id, pair.right_id) for pair in parsed.pairs] == [("L1", "R1"), ("L2", "R2")]
    assert parsed.pairs[1].right_content_blocks[0].content == "Madrid"
    assert parsed.max_associations == 2
    assert parsed.prompt_blocks[0].content == "Match each country"


def test_match_pairs_by_position_without_correct_response() -> None:
    body = (
        "<qti-match-interaction>"
        '<qti-simple-match-set><qti-simple-associable-choice identifier="a"><div>A</div></qti-simple-associable-choice>'
        '<qti-simple-associable-choice identifier="b"><div>B</div></qti-simple-associable-choice></qti-simple-match-set>'
        '<qti-simple-match-set><qti-simple-associable-choice identifier="1"><div>1</div></qti-simple-associable-choice>'
        '<qti-simple-associable-choice identifier="2"><div>2</div></qti-simple-associable-choice></qti-simple-match-set>'
        "</qti-match-interaction>"
    )
    parsed = parse_match_xml(_item(body))
    assert parsed is not None
    assert [(pair.left_id, pair.right_id) for pair in parsed.pairs] == [("a", "1"), ("b", "2")]
    assert parsed.max_associations == 3
    assert parse_match_xml(_item(body), strict=True) is None


def test_malformed_xml_returns_none() -> None:
    for parser in get_parsers().values():
        assert parser("<qti-assessment-item><unclosed>") is None
        assert parser("not xml at all") is None


def test_missing_interaction_returns_none() -> None:
    xml = _item("<div>no interaction here</div>")
    for parser in get_parsers().values():
        assert parser(xml) is None


def test_legacy_camel_case_documents_are_not_parsed() -> None:
    xml = """<assessmentItem xmlns="http://www.imsglobal.org/xsd/imsqti_v2p1" identifier="old">
  <itemBody><orderInteraction responseIdentifier="RESPONSE"/></itemBody>
</assessmentItem>"""
    assert parse_order_xml(xml) is None


def test_choice_round_trip() -> None:
    original = MultipleChoiceQuestion(
        identifier="q1",
        title="Arithmetic",
        prompt_blocks=[_text("<p>2+2?</p>")],
        options=[
            MultipleChoiceOption(identifier="A", content_blocks=[_text("4")], is_correct=True),
            MultipleChoiceOption(
                identifier="B",
                content_blocks=[_text("5")],
                inline_feedback_blocks=[_text("Count again")],
            ),
            MultipleChoiceOption(identifier="C", content_blocks=[_text("four")], is_correct=True),
        ],
        max_choices=2,
        orientation=Orientation.VERTICAL,
    )
    parsed = parse_choice_xml(generate_choice_xml(original))
    assert parsed is not None
    assert [(option.identifier, option.is_correct) for option in parsed.options] == [
        ("A", True),
        ("B", False),
        ("C", True),
    ]
    assert [block.content for block in parsed.options[1].content_blocks] == ["5"]
    assert parsed.options[1].inline_feedback_blocks[0].content == "Count again"
    assert parsed.max_choices == 2
    assert parsed.shuffle is False
    assert parsed.prompt_blocks[0].content == "<p>2+2?</p>"


def test_choice_strict_mode_requires_correct_response() -> None:
    body = (
        '<qti-choice-interaction response-identifier="RESPONSE">'
        '<qti-simple-choice identifier="A">yes</qti-simple-choice>'
        "</qti-choice-interaction>"
    )
    assert parse_choice_xml(_item(body), strict=True) is None
    lenient = parse_choice_xml(_item(body))
    assert lenient.options[0].content_blocks[0].content == "yes"
    assert lenient.options[0].is_correct is False
    assert lenient.max_choices == 1
    assert lenient.orientation == Orientation.VERTICAL


def test_text_entry_round_trip() -> None:
    original = TextEntryQuestion(
        identifier="te-1",
        title="Capital",
        prompt_blocks=[_text("Capital of France?")],
        correct_answers=["Paris", "PARIS"],
        case_sensitive=True,
        expected_length=12,
        pattern_mask="^[A-Z]+$",
    )
    parsed = parse_text_entry_xml(generate_text_entry_xml(original))
    assert parsed is not None
    assert parsed.correct_answers == ["Paris", "PARIS"]
    assert parsed.case_sensitive is True
    assert parsed.expected_length == 12
    assert parsed.pattern_mask == "^[A-Z]+$"
    assert parsed.prompt_blocks[0].content == "Capital of France?"


def test_text_entry_without_mapping_is_case_sensitive() -> None:
    body = '<qti-text-entry-interaction response-identifier="RESPONSE"/>'
    parsed = parse_text_entry_xml(_item(body, "<qti-value>Paris</qti-value>"))
    assert parsed.correct_answers == ["Paris"]
    assert parsed.case_sensitive is True
    assert parsed.expected_length is None
    assert parse_text_entry_xml(_item(body), strict=True) is None


def _hottext_question() -> HottextQuestion:
    return HottextQuestion(
        identifier="ht-2",
        title="Verbs",
        prompt_blocks=[_text("Select the verbs")],
        content_blocks=[_text("The cat sat and ran.")],
        hottext_items=[
            HottextItem(identifier="h1", content=HottextContent(value="sat"), styles={"fontWeight": "bold"}),
            HottextItem(identifier="h2", content=HottextContent(type=HottextContentType.HTML, value="<i>ran</i>")),
            HottextItem(identifier="h3", content=HottextContent(type=HottextContentType.IMAGE, value="cat.png")),
        ],
        correct_answers=["h1", "h2"],
        max_choices=2,
        global_styles={"fontFamily": "Georgia", "color": "#333"},
        custom_css=".hot > span { cursor: pointer; }",
        correct_feedback_blocks=[_text("Yes")],
        incorrect_feedback_blocks=[_text("No")],
    )


def test_hottext_round_trip() -> None:
    parsed = parse_hottext_xml(generate_hottext_xml(_hottext_question()))
    assert parsed is not None
    assert parsed.identifier == "ht-2"
    assert parsed.max_choices == 2
    assert parsed.correct_answers == ["h1", "h2"]
    assert parsed.global_styles == {"fontFamily": "Georgia", "color": "#333"}
    assert parsed.custom_css == ".hot > span { cursor: pointer; }"
    assert [block.content for block in parsed.prompt_blocks] == ["Select the verbs"]
    assert [block.content for block in parsed.content_blocks] == ["The cat sat and ran."]

    items = {item.identifier: item for item in parsed.hottext_items}
    assert items["h1"].content.type == HottextContentType.TEXT
    assert items["h1"].content.value == "sat"
    assert items["h1"].styles == {"fontWeight": "bold"}
    assert items["h2"].content.type == HottextContentType.HTML
    assert items["h2"].content.value == "<i>ran</i>"
    assert items["h3"].content.type == HottextContentType.IMAGE
    assert items["h3"].content.value == "cat.png"

    assert [block.content for block in parsed.correct_feedback_blocks] == ["Yes"]
    assert [block.content for block in parsed.incorrect_feedback_blocks] == ["No"]


def test_hottext_drops_dangling_correct_answers() -> None:
    question = _hottext_question()
    question.correct_answers = ["h1", "ghost"]
    xml = generate_hottext_xml(question)
    assert parse_hottext_xml(xml).correct_answers == ["h1"]
    assert parse_hottext_xml(xml, strict=True) is None


def test_editor_html_round_trips_as_markup() -> None:
    question = MultipleChoiceQuestion(
        identifier="q-html",
        prompt_blocks=[_text("<p>a<br>b&nbsp;c</p>")],
        options=[MultipleChoiceOption(identifier="A", content_blocks=[_text("x")], is_correct=True)],
    )
    parsed = parse_choice_xml(generate_choice_xml(question))
    assert parsed is not None
    assert parsed.prompt_blocks[0].content == "<p>a<br />b\u00a0c</p>"


def test_text_entry_answers_keep_surrounding_spaces() -> None:
    original = TextEntryQuestion(identifier="te-ws", correct_answers=[" Paris ", "Paris"])
    parsed = parse_text_entry_xml(generate_text_entry_xml(original))
    assert parsed.correct_answers == [" Paris ", "Paris"]
