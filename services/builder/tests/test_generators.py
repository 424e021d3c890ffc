import xml.etree.ElementTree as ET

from qtibuilder.enums import BlockType, HottextContentType, Orientation
from qtibuilder.generators.choice_generator import generate_choice_xml
from qtibuilder.generators.hottext_generator import generate_hottext_xml
from qtibuilder.generators.match_generator import generate_match_xml
from qtibuilder.generators.order_generator import generate_order_xml
from qtibuilder.generators.registry import get_generators
from qtibuilder.generators.text_entry_generator import generate_text_entry_xml
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

NS = "{http://www.imsglobal.org/xsd/imsqtiasi_v3p0}"


def _text(content: str) -> ContentBlock:
    return ContentBlock(type=BlockType.TEXT, content=content)


def _choice_question(max_choices: int = 1) -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        identifier="q1",
        title="Arithmetic",
        prompt_blocks=[_text("<p>2+2?</p>")],
        options=[
            MultipleChoiceOption(identifier="A", content_blocks=[_text("4")], is_correct=True),
            MultipleChoiceOption(identifier="B", content_blocks=[_text("5")]),
        ],
        max_choices=max_choices,
    )


def _correct_values(root: ET.Element) -> list[str]:
    correct = root.find(f"{NS}qti-response-declaration/{NS}qti-correct-response")
    assert correct is not None
    return [value.text for value in correct.findall(f"{NS}qti-value")]


def test_choice_end_to_end() -> None:
    xml = generate_choice_xml(_choice_question())
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert 'cardinality="single"' in xml
    assert xml.count("<qti-value>A</qti-value>") == 1

    root = ET.fromstring(xml.encode("utf-8"))
    assert root.tag == f"{NS}qti-assessment-item"
    assert root.get("identifier") == "q1"
    assert _correct_values(root) == ["A"]
    choices = root.findall(f".//{NS}qti-simple-choice")
    assert [choice.get("identifier") for choice in choices] == ["A", "B"]
    assert root.find(f".//{NS}qti-item-body/{NS}div/{NS}p").text == "2+2?"


def test_choice_cardinality_follows_max_choices() -> None:
    assert 'cardinality="multiple"' in generate_choice_xml(_choice_question(max_choices=2))
    assert 'cardinality="single"' in generate_choice_xml(_choice_question(max_choices=0))


def test_choice_interaction_attributes() -> None:
    question = _choice_question()
    question.shuffle = True
    question.orientation = Orientation.HORIZONTAL
    root = ET.fromstring(generate_choice_xml(question).encode("utf-8"))
    interaction = root.find(f".//{NS}qti-choice-interaction")
    assert interaction.get("max-choices") == "1"
    assert interaction.get("shuffle") == "true"
    assert interaction.get("orientation") == "horizontal"

    question.shuffle = False
    question.orientation = None
    interaction = ET.fromstring(generate_choice_xml(question).encode("utf-8")).find(
        f".//{NS}qti-choice-interaction"
    )
    assert "shuffle" not in interaction.attrib
    assert "orientation" not in interaction.attrib


def test_choice_scores_inline_and_declares_inline_feedback() -> None:
    question = _choice_question()
    question.options[1].inline_feedback_blocks = [_text("Count again.")]
    root = ET.fromstring(generate_choice_xml(question).encode("utf-8"))

    outcomes = [node.get("identifier") for node in root.findall(f"{NS}qti-outcome-declaration")]
    assert outcomes == ["SCORE", "FEEDBACK", "FEEDBACK-INLINE"]
    inline = root.find(f".//{NS}qti-simple-choice[@identifier='B']/{NS}qti-feedback-inline")
    assert inline.get("outcome-identifier") == "FEEDBACK-INLINE"
    assert root.find(f"{NS}qti-response-processing/{NS}qti-response-condition") is not None


def test_empty_correct_response_is_omitted() -> None:
    question = _choice_question()
    for option in question.options:
        option.is_correct = False
    assert "qti-correct-response" not in generate_choice_xml(question)


def test_order_correct_response_sorted_by_rank() -> None:
    question = OrderQuestion(
        identifier="order-1",
        title="Steps",
        prompt_blocks=[_text("Sort the steps")],
        options=[
            OrderOption(identifier="C", content_blocks=[_text("third")], correct_order=3),
            OrderOption(identifier="A", content_blocks=[_text("first")], correct_order=1),
            OrderOption(identifier="B", content_blocks=[_text("second")], correct_order=2),
        ],
    )
    root = ET.fromstring(generate_order_xml(question).encode("utf-8"))
    declaration = root.find(f"{NS}qti-response-declaration")
    assert declaration.get("cardinality") == "ordered"
    assert _correct_values(root) == ["A", "B", "C"]
    choices = root.findall(f".//{NS}qti-order-interaction/{NS}qti-simple-choice")
    assert [choice.get("identifier") for choice in choices] == ["C", "A", "B"]
    processing = root.find(f"{NS}qti-response-processing")
    assert processing.get("template").endswith("match_correct.xml")


def test_match_emits_directed_pairs_and_two_sets() -> None:
    question = MatchQuestion(
        identifier="match-1",
        title="Capitals",
        pairs=[
            MatchPair(left_id="L1", left_content_blocks=[_text("France")], right_id="R1", right_content_blocks=[_text("Paris")]),
            MatchPair(left_id="L2", left_content_blocks=[_text("Italy")], right_id="R2", right_content_blocks=[_text("Rome")]),
        ],
        max_associations=2,
    )
    root = ET.fromstring(generate_match_xml(question).encode("utf-8"))
    assert root.find(f"{NS}qti-response-declaration").get("base-type") == "directedPair"
    assert _correct_values(root) == ["L1 R1", "L2 R2"]

    interaction = root.find(f".//{NS}qti-match-interaction")
    assert interaction.get("max-associations") == "2"
    left, right = interaction.findall(f"{NS}qti-simple-match-set")
    assert [node.get("identifier") for node in left] == ["L1", "L2"]
    assert [node.get("identifier") for node in right] == ["R1", "R2"]
    assert {node.get("match-max") for node in left} == {"1"}
    assert {node.get("match-max") for node in right} == {"2"}


def test_text_entry_mapping_and_input_attributes() -> None:
    question = TextEntryQuestion(
        identifier="te-1",
        title="Capital",
        prompt_blocks=[_text("Capital of France?")],
        correct_answers=["Paris", "paris & co"],
        case_sensitive=False,
        expected_length=40,
        pattern_mask="^[A-Za-z ]+$",
    )
    xml = generate_text_entry_xml(question)
    root = ET.fromstring(xml.encode("utf-8"))
    assert _correct_values(root) == ["Paris", "paris & co"]
    declaration = root.find(f"{NS}qti-response-declaration")
    assert declaration.get("base-type") == "string"
    entries = declaration.findall(f"{NS}qti-mapping/{NS}qti-map-entry")
    assert [entry.get("map-key") for entry in entries] == ["Paris", "paris & co"]
    assert {entry.get("case-sensitive") for entry in entries} == {"false"}

    interaction = root.find(f".//{NS}div[@id='reference_text']/{NS}qti-text-entry-interaction")
    assert interaction.get("expected-length") == "40"
    assert interaction.get("class") == "qti-input-width-25"
    assert interaction.get("pattern-mask") == "^[A-Za-z ]+$"


def _hottext_question() -> HottextQuestion:
    return HottextQuestion(
        identifier="ht-1",
        title="Pick the verbs",
        prompt_blocks=[_text("Select the verbs")],
        content_blocks=[_text("The cat sat on the mat.")],
        hottext_items=[
            HottextItem(identifier="h1", content=HottextContent(value="sat"), styles={"color": "blue"}),
            HottextItem(identifier="h2", content=HottextContent(type=HottextContentType.HTML, value="<b>mat</b>")),
            HottextItem(identifier="h3", content=HottextContent(type=HottextContentType.IMAGE, value="cat.png")),
        ],
        correct_answers=["h1"],
        global_styles={"fontFamily": "Arial"},
        custom_css=".x > b { color: red; }",
        correct_feedback_blocks=[_text("Well done")],
    )


def test_hottext_container_prompt_and_items() -> None:
    root = ET.fromstring(generate_hottext_xml(_hottext_question()).encode("utf-8"))
    container = root.find(f"{NS}qti-item-body/{NS}div")
    assert container.get("style") == "font-family: Arial"
    assert container.find(f"{NS}style").text == ".x > b { color: red; }"

    interaction = container.find(f"{NS}qti-hottext-interaction")
    assert interaction.get("max-choices") == "1"
    assert interaction.find(f"{NS}qti-prompt/{NS}div").text == "Select the verbs"
    hottexts = interaction.findall(f".//{NS}qti-hottext")
    assert [node.get("identifier") for node in hottexts] == ["h1", "h2", "h3"]
    assert hottexts[0].find(f"{NS}span").get("style") == "color: blue"
    assert hottexts[1].find(f"{NS}span/{NS}b").text == "mat"
    assert hottexts[2].find(f"{NS}img").get("src") == "cat.png"


def test_hottext_feedback_only_scoring() -> None:
    root = ET.fromstring(generate_hottext_xml(_hottext_question()).encode("utf-8"))
    outcomes = [node.get("identifier") for node in root.findall(f"{NS}qti-outcome-declaration")]
    assert outcomes == ["FEEDBACK"]
    assert root.find(f"{NS}qti-response-declaration").get("cardinality") == "multiple"
    assert "SCORE" not in ET.tostring(root.find(f"{NS}qti-response-processing"), encoding="unicode")

    feedback = root.find(f".//{NS}qti-feedback-block[@identifier='CORRECT']")
    wrapper = feedback.find(f"{NS}qti-content-body/{NS}div")
    assert wrapper.get("style") == "font-family: Arial"
    assert wrapper.find(f"{NS}div").text == "Well done"


def test_identifier_and_title_are_escaped() -> None:
    question = _choice_question()
    question.title = 'Fish & "Chips" <quiz>'
    root = ET.fromstring(generate_choice_xml(question).encode("utf-8"))
    assert root.get("title") == 'Fish & "Chips" <quiz>'


def test_every_generator_output_is_well_formed() -> None:
    samples = {
        "hottext": _hottext_question(),
        "choice": _choice_question(),
        "order": OrderQuestion(identifier="o", options=[OrderOption(identifier="A", correct_order=1)]),
        "match": MatchQuestion(identifier="m", pairs=[MatchPair(left_id="L", right_id="R")]),
        "text-entry": TextEntryQuestion(identifier="t", correct_answers=["x"]),
    }
    generators = get_generators()
    assert set(generators) == set(samples)
    for question_type, generator in generators.items():
        root = ET.fromstring(generator.generate(samples[question_type]).encode("utf-8"))
        assert root.get("xml:lang") is None
        assert root.get("{http://www.w3.org/XML/1998/namespace}lang") == "en-US"


def test_control_characters_never_reach_the_document() -> None:
    question = _choice_question()
    question.title = "a\x01b"
    question.options[0].content_blocks = [_text("four\x1f")]
    root = ET.fromstring(generate_choice_xml(question).encode("utf-8"))
    assert root.get("title") == "ab"
    assert root.find(f".//{NS}qti-simple-choice[@identifier='A']/{NS}div").text == "four"

    answers = TextEntryQuestion(identifier="t", correct_answers=["Par\x08is"])
    root = ET.fromstring(generate_text_entry_xml(answers).encode("utf-8"))
    assert _correct_values(root) == ["Paris"]
