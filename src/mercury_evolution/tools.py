# mercury_evolution/tools.py
"""
Tool surface for a calling host.

Exposes the engine as seven tools, one operation per call:
- mercury_start_tracking / mercury_record_step / mercury_end_tracking
- mercury_analyze_intent / mercury_get_heat_map / mercury_evolve_context
- mercury_sync_with_brain

Design principles:
- Pydantic-native: Tool definitions and responses as proper models
- No magic strings: Tool names and argument choices come from enums
- Uniform failures: every EvolutionError becomes an "Error: ..." response
"""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from mercury_evolution.brain_sync import BrainSync
from mercury_evolution.constants import DEFAULT_HEAT_MAP_LIMIT, DEFAULT_MAX_TOKENS
from mercury_evolution.engine import EvolutionEngine
from mercury_evolution.exceptions import (
    EvolutionError,
    UnknownOperationError,
    ValidationError,
)
from mercury_evolution.models import InteractionType, SyncDirection

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    """Names of the exposed tools."""

    START_TRACKING = "mercury_start_tracking"
    RECORD_STEP = "mercury_record_step"
    END_TRACKING = "mercury_end_tracking"
    ANALYZE_INTENT = "mercury_analyze_intent"
    GET_HEAT_MAP = "mercury_get_heat_map"
    EVOLVE_CONTEXT = "mercury_evolve_context"
    SYNC_WITH_BRAIN = "mercury_sync_with_brain"


# =============================================================================
# Tool Definition Models
# =============================================================================


class ToolParameter(BaseModel):
    """Single parameter in a tool definition."""

    type: str
    description: str | None = Field(default=None)
    enum: list[str] | None = Field(default=None)
    minimum: float | None = Field(default=None)
    maximum: float | None = Field(default=None)
    default: Any | None = Field(default=None)


class ToolInputSchema(BaseModel):
    """Input schema for a tool."""

    type: str = Field(default="object")
    properties: dict[str, ToolParameter] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ToolDefinition(BaseModel):
    """Complete tool definition."""

    name: ToolName
    description: str
    input_schema: ToolInputSchema = Field(serialization_alias="inputSchema")


class TextContent(BaseModel):
    """Text block in a tool response."""

    type: str = "text"
    text: str


class ToolResponse(BaseModel):
    """Result of a tool call."""

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolResponse:
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


TOOL_DEFINITIONS: list[ToolDefinition] = [
    ToolDefinition(
        name=ToolName.START_TRACKING,
        description="Start tracking a knowledge navigation session",
        input_schema=ToolInputSchema(
            properties={
                "intent": ToolParameter(type="string", description="What you are trying to accomplish"),
                "replace": ToolParameter(
                    type="boolean",
                    description="Abandon an already-active session instead of failing",
                    default=False,
                ),
            },
            required=["intent"],
        ),
    ),
    ToolDefinition(
        name=ToolName.RECORD_STEP,
        description="Record a navigation step in the current session",
        input_schema=ToolInputSchema(
            properties={
                "path": ToolParameter(type="string", description="Path or identifier of the accessed resource"),
                "type": ToolParameter(
                    type="string",
                    enum=[t.value for t in InteractionType],
                    description="Type of interaction",
                ),
            },
            required=["path", "type"],
        ),
    ),
    ToolDefinition(
        name=ToolName.END_TRACKING,
        description="End the current tracking session with a success rating",
        input_schema=ToolInputSchema(
            properties={
                "success": ToolParameter(
                    type="number",
                    minimum=0,
                    maximum=1,
                    description="Success rating (0-1)",
                ),
            },
            required=["success"],
        ),
    ),
    ToolDefinition(
        name=ToolName.ANALYZE_INTENT,
        description="Analyze user intent from natural language input",
        input_schema=ToolInputSchema(
            properties={"input": ToolParameter(type="string", description="User input to analyze")},
            required=["input"],
        ),
    ),
    ToolDefinition(
        name=ToolName.GET_HEAT_MAP,
        description="Get the current knowledge heat map",
        input_schema=ToolInputSchema(
            properties={
                "limit": ToolParameter(
                    type="number",
                    description="Maximum number of hot nodes to return",
                    default=DEFAULT_HEAT_MAP_LIMIT,
                ),
            },
        ),
    ),
    ToolDefinition(
        name=ToolName.EVOLVE_CONTEXT,
        description="Load context adaptively based on intent and patterns",
        input_schema=ToolInputSchema(
            properties={
                "intent": ToolParameter(type="string", description="Current intent or task"),
                "maxTokens": ToolParameter(
                    type="number",
                    description="Maximum tokens to load",
                    default=DEFAULT_MAX_TOKENS,
                ),
            },
            required=["intent"],
        ),
    ),
    ToolDefinition(
        name=ToolName.SYNC_WITH_BRAIN,
        description="Sync evolution data with Brain memory system",
        input_schema=ToolInputSchema(
            properties={
                "direction": ToolParameter(
                    type="string",
                    enum=[d.value for d in SyncDirection],
                    default=SyncDirection.BRAIN_TO_MERCURY.value,
                ),
            },
        ),
    ),
]


def get_tools_as_dicts() -> list[dict[str, Any]]:
    """Tool definitions as plain dicts for a host's tool listing."""
    return [tool.model_dump(mode="json", by_alias=True, exclude_none=True) for tool in TOOL_DEFINITIONS]


# =============================================================================
# Argument helpers
# =============================================================================


def _require_str(args: dict[str, Any], name: str) -> str:
    value = args.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required argument: {name}")
    return value


def _number(args: dict[str, Any], name: str, default: float | None = None) -> float:
    value = args.get(name, default)
    if value is None:
        raise ValidationError(f"Missing required argument: {name}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Argument {name} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"Argument {name} must be a finite number")
    return value


def _choice(args: dict[str, Any], name: str, enum_cls: type[Enum], default: str | None = None) -> Any:
    value = args.get(name, default)
    if value is None:
        raise ValidationError(f"Missing required argument: {name}")
    try:
        return enum_cls(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {name}: {value} (expected one of {allowed})") from e


# =============================================================================
# Dispatch
# =============================================================================


class EvolutionToolHandler:
    """
    Dispatches tool calls to the engine and formats the replies.

    Usage::

        handler = EvolutionToolHandler(EvolutionEngine())
        response = await handler.call("mercury_start_tracking", {"intent": "fix sync"})
        print(response.first_text)
    """

    def __init__(self, engine: EvolutionEngine, brain_sync: BrainSync | None = None) -> None:
        self.engine = engine
        self.brain_sync = brain_sync or BrainSync(engine)
        self._handlers: dict[ToolName, Callable[[dict[str, Any]], Awaitable[str]]] = {
            ToolName.START_TRACKING: self._start_tracking,
            ToolName.RECORD_STEP: self._record_step,
            ToolName.END_TRACKING: self._end_tracking,
            ToolName.ANALYZE_INTENT: self._analyze_intent,
            ToolName.GET_HEAT_MAP: self._get_heat_map,
            ToolName.EVOLVE_CONTEXT: self._evolve_context,
            ToolName.SYNC_WITH_BRAIN: self._sync_with_brain,
        }

    def list_tools(self) -> list[dict[str, Any]]:
        return get_tools_as_dicts()

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Run one tool call; engine failures come back as error responses."""
        try:
            try:
                tool = ToolName(name)
            except ValueError as e:
                raise UnknownOperationError(f"Unknown tool: {name}") from e
            text = await self._handlers[tool](arguments or {})
            return ToolResponse.text(text)
        except EvolutionError as e:
            logger.warning(f"Tool {name} failed ({e.kind.value}): {e.message}")
            return ToolResponse.text(f"Error: {e.message}", is_error=True)

    # --- Handlers ---

    async def _start_tracking(self, args: dict[str, Any]) -> str:
        intent = _require_str(args, "intent")
        session = await self.engine.start_tracking(intent, replace=bool(args.get("replace", False)))
        return f"🎯 Started tracking session: {session.id}\nIntent: {intent}"

    async def _record_step(self, args: dict[str, Any]) -> str:
        path = _require_str(args, "path")
        interaction_type = _choice(args, "type", InteractionType)
        await self.engine.record_step(path, interaction_type)
        return f"📝 Recorded {interaction_type.value}: {path}"

    async def _end_tracking(self, args: dict[str, Any]) -> str:
        success = _number(args, "success")
        if not 0 <= success <= 1:
            raise ValidationError("Argument success must be between 0 and 1")
        result = await self.engine.end_tracking(success)
        return (
            "✅ Session ended\n"
            f"Path length: {result.path_length}\n"
            f"Duration: {round(result.duration / 1000)}s\n"
            f"Success: {round(success * 100)}%\n"
            f"Heat updated: {'Yes' if result.heat_updated else 'No'}"
        )

    async def _analyze_intent(self, args: dict[str, Any]) -> str:
        analysis = await self.engine.analyze_intent(_require_str(args, "input"))
        lines = [
            "🧠 Intent Analysis:",
            f"Primary: {analysis.intent.value} ({round(analysis.confidence * 100)}%)",
            f"Signals: {', '.join(s.value for s in analysis.signals)}",
        ]
        if analysis.alternatives:
            lines.append(f"Alternatives: {', '.join(a.value for a in analysis.alternatives)}")
        return "\n".join(lines)

    async def _get_heat_map(self, args: dict[str, Any]) -> str:
        limit = int(_number(args, "limit", DEFAULT_HEAT_MAP_LIMIT))
        summary = await self.engine.get_heat_map(limit)

        text = "🔥 Knowledge Heat Map:\n\nHot Nodes:\n"
        for i, node in enumerate(summary.hot_nodes, start=1):
            text += f"{i}. {node.path} (heat: {node.heat:.2f}, accesses: {node.access_count})\n"

        if summary.strong_edges:
            text += "\nStrong Connections:\n"
            for i, edge in enumerate(summary.strong_edges, start=1):
                text += f"{i}. {edge.source} → {edge.target} (strength: {edge.heat:.2f})\n"

        text += f"\nTotal paths: {summary.total_paths}"
        return text

    async def _evolve_context(self, args: dict[str, Any]) -> str:
        intent = _require_str(args, "intent")
        max_tokens = int(_number(args, "maxTokens", DEFAULT_MAX_TOKENS))
        result = await self.engine.evolve_context(intent, max_tokens)

        text = "🧬 Adaptive Context Loading:\n\n"
        text += f"Intent: {result.intent.value}\n"
        text += f"Confidence: {round(result.confidence * 100)}%\n"
        text += f"Loaded: {len(result.loaded_paths)} paths ({result.total_tokens} tokens)\n"

        if result.loaded_paths:
            text += "\nLoaded Paths:\n"
            for i, planned in enumerate(result.loaded_paths, start=1):
                text += f"{i}. {planned.path} (gradient: {planned.gradient:.2f})\n"
        return text

    async def _sync_with_brain(self, args: dict[str, Any]) -> str:
        direction = args.get("direction", SyncDirection.BRAIN_TO_MERCURY.value)
        result = await self.brain_sync.sync(direction)
        return (
            "🔄 Sync complete:\n"
            f"Direction: {result.direction.value}\n"
            f"Paths synced: {result.paths_synced}\n"
            f"Heat map updated: {'Yes' if result.heat_map_updated else 'No'}\n"
            f"{result.message}"
        )
