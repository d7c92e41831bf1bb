"""
Diagnostics and debug tracing for flowlayout.

Layout never aborts on a local defect. Instead each stage records a
Diagnostic and carries on with whatever geometry it can still produce. This
module provides the containers for those records:

1. Diagnostic - one advisory message (no root, unknown port, ...)
2. PipelineStage - snapshot of intermediate data after a stage
3. LayoutTrace - everything collected during one layout pass

Usage:
    >>> from flowlayout import FlowchartLayout
    >>> engine = FlowchartLayout(debug=True)
    >>> result = engine.layout({"nodes": [{"id": "a"}], "edges": []})
    >>> trace = engine.get_trace()
    >>> print(trace.summary())

Every diagnostic is also logged as a warning through loguru. The library
disables its own logger on import; call ``logger.enable("flowlayout")`` to
see the messages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from loguru import logger


class DiagnosticCode(str, Enum):
    """Kinds of soft failure a layout pass can report."""

    EMPTY_GRAPH = "empty_graph"
    NO_ROOT = "no_root"
    AMBIGUOUS_ROOT = "ambiguous_root"
    DUPLICATE_NODE = "duplicate_node"
    DISCONNECTED_NODE = "disconnected_node"
    PARENT_UNPOSITIONED = "parent_unpositioned"
    NODE_UNPOSITIONED = "node_unpositioned"
    MISSING_NODE = "missing_node"
    UNKNOWN_PORT = "unknown_port"


@dataclass(frozen=True)
class Diagnostic:
    """
    An advisory message produced during layout.

    Attributes:
        code: Machine-readable kind of problem.
        message: Human-readable description.
        node_id: Node the message is about, if any.
        edge_index: Position of the edge in the input edge list, if any.
    """

    code: DiagnosticCode
    message: str
    node_id: Optional[str] = None
    edge_index: Optional[int] = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


@dataclass
class PipelineStage:
    """
    Snapshot of data after one layout stage.

    The layout pipeline has four stages:
    1. levels - root selection and breadth-first level assignment
    2. positions - node widths and coordinates
    3. ports - port anchors
    4. edges - edge endpoints

    Attributes:
        name: Name of this pipeline stage.
        data: Dictionary of relevant data at this stage.
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Diagnostics and stage snapshots collected during a layout pass.

    Every layout function accepts an optional trace. When none is given the
    function creates a private one, so diagnostics are always available on
    the returned result even if the caller did not ask for a trace.

    Attributes:
        diagnostics: Advisory messages in the order they were raised.
        stages: Stage snapshots, only filled when ``record_stages`` is set.
        record_stages: Whether add_stage() keeps its data.
    """

    diagnostics: List[Diagnostic] = field(default_factory=list)
    stages: List[PipelineStage] = field(default_factory=list)
    record_stages: bool = False

    def warn(
        self,
        code: DiagnosticCode,
        message: str,
        node_id: Optional[str] = None,
        edge_index: Optional[int] = None,
    ) -> Diagnostic:
        """Record a diagnostic and log it."""
        diagnostic = Diagnostic(code, message, node_id, edge_index)
        self.diagnostics.append(diagnostic)
        logger.warning("{}", diagnostic)
        return diagnostic

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Add a pipeline stage snapshot if stage recording is on."""
        if self.record_stages:
            self.stages.append(PipelineStage(name, data.copy()))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_diagnostics(self, code: DiagnosticCode) -> List[Diagnostic]:
        """All diagnostics with the given code."""
        return [d for d in self.diagnostics if d.code == code]

    def has(self, code: DiagnosticCode) -> bool:
        return any(d.code == code for d in self.diagnostics)

    def summary(self) -> str:
        """Human-readable summary: stages run and diagnostic counts."""
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  {stage.name}")

        lines.extend(["", f"Diagnostics: {len(self.diagnostics)}"])

        code_counts: Dict[str, int] = {}
        for d in self.diagnostics:
            code_counts[d.code.value] = code_counts.get(d.code.value, 0) + 1
        for code, count in sorted(code_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {code}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """Summary followed by every stage and every diagnostic."""
        lines = [self.summary(), "", "PIPELINE STAGES:", "-" * 40]
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("DIAGNOSTICS:")
        lines.append("-" * 40)
        for d in self.diagnostics:
            lines.append(str(d))

        return "\n".join(lines)
