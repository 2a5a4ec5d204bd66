from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Display-grouping class of a violation. No numeric weighting is implied."""
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


class AffectedNode(BaseModel):
    """
    A concrete element instance matching a violation.
    Carries the serialized element snippet and its best-effort source line.
    """
    model_config = ConfigDict(frozen=True)

    element: str
    line: Optional[int] = None
    description: Optional[str] = None


class Violation(BaseModel):
    """
    One detected issue category with its severity and affected nodes.
    Nodes keep the document order in which the rule discovered them.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    description: str
    severity: Severity
    nodes: List[AffectedNode] = Field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.nodes)


class ExternalAuditResult(BaseModel):
    """
    Output channel of the optional external audit engine.
    Violations are kept in the engine's own (opaque) shape and are never
    reconciled with the rule-set vocabulary.
    """
    engine: str
    success: bool
    violations: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None


class AuditReport(BaseModel):
    """Result of analyzing one document: the rule-set channel plus the optional external channel."""
    violations: List[Violation] = Field(default_factory=list)
    external: Optional[ExternalAuditResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
