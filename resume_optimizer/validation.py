"""Schema validation on top of pydantic type adapters."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, List, Sequence, Tuple, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

ROOT_PATH = "<root>"


@dataclass(frozen=True)
class ValidationIssue:
    """A single constraint violation at a field path."""

    path: str
    message: str

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message}


class SchemaViolation(Exception):
    """Raised when a value does not conform to its declared shape.

    Not tagged with an agent; callers wrap it into an agent-level error
    without losing ``issues``.
    """

    def __init__(self, issues: Sequence[ValidationIssue]):
        self.issues: Tuple[ValidationIssue, ...] = tuple(issues)
        super().__init__(format_issues(self.issues))


def format_path(loc: Iterable[Union[str, int]]) -> str:
    """Render a pydantic ``loc`` tuple as ``experience[0].company``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or ROOT_PATH


def format_issues(issues: Sequence[ValidationIssue]) -> str:
    if not issues:
        return "validation failed"
    return "; ".join(f"{issue.path}: {issue.message}" for issue in issues)


def issues_from_pydantic(exc: PydanticValidationError) -> List[ValidationIssue]:
    """Convert a pydantic error into ordered path-level issues."""
    return [
        ValidationIssue(path=format_path(error.get("loc", ())), message=error.get("msg", "invalid value"))
        for error in exc.errors()
    ]


@lru_cache(maxsize=256)
def _cached_adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def _adapter_for(shape: Any) -> TypeAdapter:
    try:
        return _cached_adapter(shape)
    except TypeError:
        # unhashable shape (e.g. Annotated with a list inside)
        return TypeAdapter(shape)


def validate(shape: Any, value: Any) -> Any:
    """Validate ``value`` against ``shape`` and return the coerced value.

    Defaults are filled in only when the whole value conforms; the input is
    never mutated.

    Raises:
        SchemaViolation: listing every violating field path
    """
    adapter = _adapter_for(shape)
    try:
        return adapter.validate_python(value)
    except PydanticValidationError as exc:
        raise SchemaViolation(issues_from_pydantic(exc)) from exc
