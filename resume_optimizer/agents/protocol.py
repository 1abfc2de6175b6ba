"""Agent contract: descriptor, protocol and validation helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..errors import AgentValidationError, ConfigurationError
from ..validation import SchemaViolation, validate

UNNAMED_AGENT = "<unnamed agent>"


class AgentDescriptor(BaseModel):
    """Immutable identity and configuration of an agent.

    ``timeout_ms`` left as ``None`` inherits the pipeline default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    description: str
    version: str = Field(min_length=1)
    timeout_ms: Optional[int] = Field(default=None, gt=0)

    def public_info(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description, "version": self.version}


@runtime_checkable
class Agent(Protocol):
    """What the orchestrator needs from a stage."""

    descriptor: AgentDescriptor

    async def execute(self, input: Any) -> Any: ...


def build_descriptor(**fields: Any) -> AgentDescriptor:
    """Validate descriptor fields, failing loudly at construction time.

    Raises:
        ConfigurationError: carrying every violated field path
    """
    try:
        return validate(AgentDescriptor, fields)
    except SchemaViolation as exc:
        name = fields.get("name")
        if not isinstance(name, str) or not name:
            name = UNNAMED_AGENT
        raise ConfigurationError("Invalid agent descriptor", name, exc.issues) from exc


def get_descriptor(agent: Agent) -> Dict[str, str]:
    return agent.descriptor.public_info()


def validate_input(descriptor: AgentDescriptor, shape: Any, value: Any) -> Any:
    try:
        return validate(shape, value)
    except SchemaViolation as exc:
        raise AgentValidationError("Input validation failed", descriptor.name, exc.issues) from exc


def validate_output(descriptor: AgentDescriptor, shape: Any, value: Any) -> Any:
    try:
        return validate(shape, value)
    except SchemaViolation as exc:
        raise AgentValidationError("Output validation failed", descriptor.name, exc.issues) from exc


def to_handoff(value: Any) -> Any:
    """Turn a validated model into the plain data handed to the next stage."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value
