"""Node modification requests, contexts and results."""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from flowise_core.schemas.graph import WorkflowGraph


class WorkflowType(str, enum.Enum):
    CHATFLOW = "CHATFLOW"
    AGENTFLOW = "AGENTFLOW"
    MULTIAGENT = "MULTIAGENT"
    ASSISTANT = "ASSISTANT"


class ModificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node_id: str = Field(alias="nodeId")
    modifications: dict[str, Any] = {}


class ModificationContext(BaseModel):
    workflow_type: WorkflowType | None = None
    agent_capabilities: list[str] = []
    user_intent: str = ""


class FieldChange(BaseModel):
    old: Any = None
    new: Any = None


class ModificationResult(BaseModel):
    success: bool
    modified_graph: WorkflowGraph | None = None
    modified_node_ids: list[str] = []
    changes: dict[str, dict[str, FieldChange]] = {}
    errors: list[str] = []
    warnings: list[str] = []


class ModificationSuggestion(BaseModel):
    node_id: str
    modifications: dict[str, Any]
    reason: str
    priority: Literal["low", "medium", "high"] = "medium"

    def to_request(self) -> ModificationRequest:
        return ModificationRequest(node_id=self.node_id, modifications=dict(self.modifications))
