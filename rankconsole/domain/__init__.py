"""Domain layer definitions."""

from .identity import Board, BoardIdentity, DataIdentity, Identity, Part
from .workflow import (
    BoardPhase,
    BoardWorkflowState,
    DataPhase,
    DataWorkflowState,
    StepState,
    StepStatus,
)

__all__ = [
    "Board",
    "BoardIdentity",
    "BoardPhase",
    "BoardWorkflowState",
    "DataIdentity",
    "DataPhase",
    "DataWorkflowState",
    "Identity",
    "Part",
    "StepState",
    "StepStatus",
]
