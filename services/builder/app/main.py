"""Builder service: QTI 3.0 generation, import and validation endpoints."""

from __future__ import annotations

import logging
import re
from typing import Any

from fastapi import FastAPI, HTTPException, Response, status
from pydantic import ValidationError
from qtibuilder.config import get_settings
from qtibuilder.correlation import CorrelationIdMiddleware
from qtibuilder.enums import QuestionType
from qtibuilder.logging import configure_logging
from qtibuilder.otel import get_tracer, init_otel
from qtibuilder.parsers.detection import detect_question_type
from qtibuilder.schemas import (
    DetectTypeRequest,
    DetectTypeResponse,
    ParseXMLRequest,
    ParseXMLResponse,
    QuestionBase,
    ValidationResult,
    XMLGenerationRequest,
)
from qtibuilder.validation import validate_question

from app.registry import get_generators, get_parsers

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

UNSAFE_FILENAME_PATTERN = re.compile(r"[^A-Za-z0-9_.-]+")

app = FastAPI(title="QTI Builder Service", version="0.1.0")
app.add_middleware(CorrelationIdMiddleware)


@app.on_event("startup")
def startup() -> None:
    init_otel("builder")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "builder"}


@app.get("/v1/question-types")
def list_question_types() -> dict[str, list[str]]:
    return {"types": sorted(str(question_type) for question_type in get_generators())}


def _question_type(value: str) -> QuestionType:
    try:
        return QuestionType(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported question type: {value}"
        ) from None


def _load_question(question_type: QuestionType, data: dict[str, Any]) -> QuestionBase:
    try:
        return get_generators()[question_type].load(data)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=[
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in exc.errors()
            ],
        ) from None


def _download_filename(identifier: str) -> str:
    stem = UNSAFE_FILENAME_PATTERN.sub("_", identifier).strip("._")
    return f"{stem or get_settings().download_filename_fallback}.xml"


@app.post("/v1/validate", response_model=ValidationResult)
def validate(payload: XMLGenerationRequest) -> ValidationResult:
    question_type = _question_type(payload.type)
    question = _load_question(question_type, payload.data)
    return validate_question(question_type, question)


@app.post("/v1/generate-xml")
def generate_xml(payload: XMLGenerationRequest) -> Response:
    question_type = _question_type(payload.type)
    question = _load_question(question_type, payload.data)

    result = validate_question(question_type, question)
    if not result.valid:
        raise HTTPException(
            status_code=422,
            detail=[issue.model_dump() for issue in result.issues],
        )

    with tracer.start_as_current_span("qti.generate") as span:
        span.set_attribute("qti.question_type", str(question_type))
        try:
            xml = get_generators()[question_type].generate(question)
        except Exception:
            logger.exception(
                "xml generation failed",
                extra={"question_type": str(question_type), "identifier": question.identifier},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate XML"
            ) from None

    logger.info(
        "xml generated", extra={"question_type": str(question_type), "identifier": question.identifier}
    )
    filename = _download_filename(question.identifier)
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _check_size(xml: str) -> None:
    limit = get_settings().max_xml_bytes
    if len(xml.encode("utf-8")) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"XML payload exceeds {limit} bytes",
        )


def _detect_or_400(xml: str) -> QuestionType:
    question_type = detect_question_type(xml)
    if question_type is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unable to detect question type"
        )
    return question_type


@app.post("/v1/detect-type", response_model=DetectTypeResponse)
def detect_type(payload: DetectTypeRequest) -> DetectTypeResponse:
    _check_size(payload.xml)
    return DetectTypeResponse(type=_detect_or_400(payload.xml))


@app.post("/v1/parse-xml", response_model=ParseXMLResponse)
def parse_xml(payload: ParseXMLRequest) -> ParseXMLResponse:
    _check_size(payload.xml)
    question_type = payload.type or _detect_or_400(payload.xml)
    strict = payload.strict if payload.strict is not None else get_settings().parser_strict_mode

    with tracer.start_as_current_span("qti.parse") as span:
        span.set_attribute("qti.question_type", str(question_type))
        span.set_attribute("qti.strict", strict)
        question = get_parsers()[question_type](payload.xml, strict=strict)

    if question is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid QTI XML")
    logger.info(
        "xml imported", extra={"question_type": str(question_type), "identifier": question.identifier}
    )
    return ParseXMLResponse(type=question_type, data=question.model_dump(by_alias=True, mode="json"))
