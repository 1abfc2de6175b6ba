"""Human approval checkpoint between model-backed stages."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from ..errors import AgentExecutionError
from .protocol import build_descriptor, to_handoff, validate_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalDecision:
    approved: bool
    comment: str = ""


Approver = Callable[[Any], Union[bool, ApprovalDecision, Awaitable[Union[bool, ApprovalDecision]]]]


class ApprovalAgent:
    """Pass the value through unchanged once a human approves it.

    A rejection fails the stage, which halts the pipeline.
    """

    def __init__(
        self,
        approver: Approver,
        shape: Any = None,
        timeout_ms: Optional[int] = 600000,
        name: str = "ApprovalAgent",
        version: str = "1.0.0",
    ):
        self.descriptor = build_descriptor(
            name=name,
            description="Waits for a human to approve the intermediate result",
            version=version,
            timeout_ms=timeout_ms,
        )
        self.approver = approver
        self.shape = shape

    async def execute(self, input: Any) -> Any:
        value = validate_input(self.descriptor, self.shape, input) if self.shape is not None else input
        handoff = to_handoff(value)

        if inspect.iscoroutinefunction(self.approver):
            decision = await self.approver(handoff)
        else:
            # blocking reviewers (console prompts) run off the event loop
            decision = await asyncio.to_thread(self.approver, handoff)
            if inspect.isawaitable(decision):
                decision = await decision
        if isinstance(decision, bool):
            decision = ApprovalDecision(approved=decision)

        if not decision.approved:
            reason = f": {decision.comment}" if decision.comment else ""
            raise AgentExecutionError(f"Rejected by reviewer{reason}", self.descriptor.name)

        logger.info(f"[{self.descriptor.name}] Approved{' - ' + decision.comment if decision.comment else ''}")
        return handoff
