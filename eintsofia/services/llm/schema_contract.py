"""
Structured-output contract for every JSON model call.

The pydantic models in ``domain.models`` are the single source of truth: the
response schema sent with the request is derived from them, and the same
models validate the reply. No I/O happens here.
"""

import json
import logging
import re
import types as pytypes
from enum import Enum
from typing import Any, Dict, List, Literal, Type, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from eintsofia.domain.models.analysis_result import AnalysisResult, StructuredReport
from eintsofia.services.llm.exceptions import (
    MalformedResponseError,
    SchemaViolationError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_SCALAR_TYPES = {
    str: "STRING",
    float: "NUMBER",
    int: "INTEGER",
    bool: "BOOLEAN",
}

# Opening fence with an optional language tag; the body may follow on the same line
_LEADING_FENCE = re.compile(r"\A```[A-Za-z0-9_+.\-]*\s*")
_TRAILING_FENCE = re.compile(r"```\Z")


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is getattr(pytypes, "UnionType", None):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _schema_for(annotation: Any) -> Dict[str, Any]:
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)

    if origin in (list, List):
        (item_type,) = get_args(annotation) or (str,)
        return {"type": "ARRAY", "items": _schema_for(item_type)}

    if origin is Literal:
        return {"type": "STRING", "enum": [str(arg) for arg in get_args(annotation)]}

    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return {"type": "STRING", "enum": [member.value for member in annotation]}

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return build_request_schema(annotation)

    if annotation in _SCALAR_TYPES:
        return {"type": _SCALAR_TYPES[annotation]}

    raise TypeError(f"No schema mapping for annotation {annotation!r}")


def build_request_schema(model: Type[BaseModel] = StructuredReport) -> Dict[str, Any]:
    """
    Describe ``model`` as a Gemini response schema.

    Fields without a default are listed under ``required``. Only the fields
    declared on ``model`` are described, so locally attached metadata such as
    ``duration`` is never requested. Aliased fields are requested by alias.
    """
    properties: Dict[str, Any] = {}
    required: List[str] = []

    for name, field in model.model_fields.items():
        prop = _schema_for(field.annotation)
        if field.description:
            prop["description"] = field.description
        key = field.alias or name
        properties[key] = prop
        if field.is_required():
            required.append(key)

    schema: Dict[str, Any] = {"type": "OBJECT", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def required_fields(model: Type[BaseModel] = StructuredReport) -> List[str]:
    """Top-level keys the model reply must contain."""
    return [
        field.alias or name
        for name, field in model.model_fields.items()
        if field.is_required()
    ]


def build_array_schema(item_model: Type[BaseModel]) -> Dict[str, Any]:
    """Response schema for a JSON array of ``item_model`` objects."""
    return {"type": "ARRAY", "items": build_request_schema(item_model)}


def _strip_fences_once(text: str) -> str:
    stripped = _LEADING_FENCE.sub("", text, count=1)
    stripped = _TRAILING_FENCE.sub("", stripped.rstrip(), count=1)
    return stripped.strip()


def sanitize_response(raw: str) -> str:
    """
    Remove surrounding markdown code fences and whitespace from model text.

    Applied until nothing changes, so sanitizing clean text is a no-op.
    """
    text = (raw or "").strip()
    while True:
        cleaned = _strip_fences_once(text)
        if cleaned == text:
            return text
        text = cleaned
def _load_json(raw: str) -> Any:
    text = sanitize_response(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Model response is not valid JSON: {e}. Preview: {text[:200]!r}")
        raise MalformedResponseError(
            f"Model response is not valid JSON: {e}", raw_text=raw
        ) from e


def _validate_object(data: Any, model_cls: Type[ModelT], prefix: str = "") -> ModelT:
    expected = required_fields(model_cls)
    if not isinstance(data, dict):
        raise SchemaViolationError(
            f"Expected a JSON object{' at ' + prefix if prefix else ''}, "
            f"got {type(data).__name__}",
            missing_fields=[f"{prefix}{key}" for key in expected],
        )

    missing = [f"{prefix}{key}" for key in expected if key not in data]
    if missing:
        logger.error(f"Model response is missing required keys: {missing}")
        raise SchemaViolationError(
            f"Missing required keys: {', '.join(missing)}", missing_fields=missing
        )

    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        locations = [prefix + ".".join(str(p) for p in err["loc"]) for err in errors]
        logger.error(f"Model response failed validation at {locations}")
        raise SchemaViolationError(
            f"Response does not match {model_cls.__name__}: {len(errors)} error(s)",
            missing_fields=[
                loc for loc, err in zip(locations, errors) if err["type"] == "missing"
            ],
        ) from e


def parse_structured(raw: str, model_cls: Type[ModelT]) -> ModelT:
    """
    Sanitize ``raw``, parse it as JSON and validate it against ``model_cls``.

    Raises:
        MalformedResponseError: the sanitized text is not valid JSON
        SchemaViolationError: required keys are absent or the shape is invalid
    """
    return _validate_object(_load_json(raw), model_cls)


def parse_structured_list(raw: str, item_cls: Type[ModelT]) -> List[ModelT]:
    """
    Like ``parse_structured`` for a JSON array reply; every item must validate.

    Locations in errors are prefixed with the item index, e.g. ``2.severity``.
    """
    data = _load_json(raw)
    if not isinstance(data, list):
        raise SchemaViolationError(f"Expected a JSON array, got {type(data).__name__}")
    return [_validate_object(item, item_cls, f"{i}.") for i, item in enumerate(data)]


def parse_result(raw: str) -> AnalysisResult:
    """Parse the primary-analysis reply into an ``AnalysisResult``."""
    return parse_structured(raw, AnalysisResult)
