"""Workflow validation report and preview schemas."""

from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel

from flowise_core.schemas.graph import Position


class Severity(str, enum.Enum):
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"


class NodeStatus(str, enum.Enum):
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


Bucket = Literal["low", "medium", "high"]


class ValidationOptions(BaseModel):
    strict_mode: bool = False
    include_performance_analysis: bool = False
    include_cost_analysis: bool = False


class Issue(BaseModel):
    id: str
    severity: Severity
    node_id: str | None = None
    edge_id: str | None = None
    message: str
    description: str = ""
    fix: str | None = None
    suggestion: str | None = None


class OptimizationSuggestion(BaseModel):
    id: str
    type: Literal["performance", "structure", "configuration", "cost"]
    priority: Bucket
    target_nodes: list[str] = []
    message: str
    description: str
    impact: str
    implementation: str


class NodeStatusEntry(BaseModel):
    node_id: str
    status: NodeStatus
    incoming_count: int = 0
    outgoing_count: int = 0
    estimated_execution_time: str = ""
    estimated_cost: str = ""


class ExecutionPath(BaseModel):
    id: str
    type: Literal["main", "alternate"]
    node_ids: list[str]
    execution_order: int


class WorkflowMetrics(BaseModel):
    node_count: int = 0
    edge_count: int = 0
    max_depth: int = 0
    parallel_paths: int = 0
    critical_path_length: int = 0
    complexity_score: int = 0
    estimated_execution_time: str = ""
    memory_usage: Bucket = "low"
    cost_estimate: Bucket = "low"


class ValidationReport(BaseModel):
    valid: bool
    score: int
    errors: list[Issue] = []
    warnings: list[Issue] = []
    suggestions: list[OptimizationSuggestion] = []
    per_node_status: list[NodeStatusEntry] = []
    execution_paths: list[ExecutionPath] = []
    metrics: WorkflowMetrics = WorkflowMetrics()


class NodePreview(BaseModel):
    id: str
    label: str
    type: str
    category: str
    position: Position
    status: NodeStatus
    incoming_count: int = 0
    outgoing_count: int = 0
    estimated_execution_time: str = ""
    estimated_cost: str = ""


class EdgePreview(BaseModel):
    id: str
    source: str
    target: str
    status: NodeStatus
    data_flow: str = ""


class Bottleneck(BaseModel):
    node_id: str
    reason: str


class PerformanceAnalysis(BaseModel):
    bottlenecks: list[Bottleneck] = []
    critical_path: list[str] = []


class CostAnalysis(BaseModel):
    estimated_monthly_cost: str
    cost_breakdown: dict[str, int] = {}


class ValidationPreview(BaseModel):
    validation: ValidationReport
    nodes: list[NodePreview] = []
    edges: list[EdgePreview] = []
    flow: list[ExecutionPath] = []
    metrics: WorkflowMetrics = WorkflowMetrics()
    performance: PerformanceAnalysis | None = None
    cost: CostAnalysis | None = None
