"""
Bootstrap Result Models.

Structured record of what a run did, stage by stage. Provisioners append to
it while they work; the CLI logs its to_dict().

Exports:
    StepResult: One stage (optionally scoped to a database)
    BootstrapResult: Complete result of a bootstrap run
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .enums import RunMode


@dataclass
class StepResult:
    """Result of a single stage."""
    name: str
    status: str = "success"  # 'success', 'failed', 'skipped'
    database: Optional[str] = None
    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)
    grants: int = 0
    message: str = ""
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "database": self.database,
            "created": self.created,
            "existing": self.existing,
            "grants": self.grants,
            "message": self.message,
            "error": self.error,
        }


@dataclass
class BootstrapResult:
    """Complete result of a bootstrap run."""
    run_mode: RunMode = RunMode.APPLY
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    success: bool = False
    steps: List[StepResult] = field(default_factory=list)
    commands: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None

    def begin(self, name: str, database: Optional[str] = None) -> StepResult:
        """Open a step; later records go to the returned StepResult."""
        step = StepResult(name=name, database=database)
        self.steps.append(step)
        return step

    def skip(self, name: str, database: Optional[str] = None, message: str = "") -> StepResult:
        step = StepResult(name=name, status="skipped", database=database, message=message)
        self.steps.append(step)
        return step

    @property
    def created_count(self) -> int:
        return sum(len(s.created) for s in self.steps)

    @property
    def grant_count(self) -> int:
        return sum(s.grants for s in self.steps)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_mode": self.run_mode.value,
            "timestamp": self.timestamp,
            "success": self.success,
            "steps": [s.to_dict() for s in self.steps],
            "commands": self.commands,
            "error": self.error,
            "summary": {
                "total_steps": len(self.steps),
                "successful": len([s for s in self.steps if s.status == "success"]),
                "failed": len([s for s in self.steps if s.status == "failed"]),
                "skipped": len([s for s in self.steps if s.status == "skipped"]),
                "created": self.created_count,
                "existing": sum(len(s.existing) for s in self.steps),
                "grants": self.grant_count,
            }
        }
