"""
Operation result domain objects for qtpods.

Every public pod operation returns an OperationResult instead of a bare
boolean, so callers can tell a precondition failure from a failed git
command or an unparsable document without reading the logs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class OperationStatus(Enum):
    """Status of the operation on an individual pod."""
    SUCCESS = "success"
    FAILED = "failed"


class FailureKind(Enum):
    """Why an operation failed."""
    PRECONDITION = "precondition"  # target is not a git repository
    COMMAND = "command"            # external command exited non-zero
    PARSE = "parse"                # malformed catalog or manifest
    FILESYSTEM = "filesystem"      # metadata or project file not writable


@dataclass
class StepResult:
    """One external step of a multi-step protocol."""
    name: str  # e.g. "submodule_add", "deinit", "stash"
    command: List[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'command': ' '.join(self.command),
            'returncode': self.returncode,
        }


@dataclass
class PodOperationDetail:
    """
    What happened to a single pod during an operation.

    Steps are recorded in the order they were attempted; steps that were
    never reached because an earlier one failed are absent.
    """
    pod_name: str
    action: str  # e.g. "install", "remove", "update"
    status: OperationStatus = OperationStatus.SUCCESS
    steps: List[StepResult] = field(default_factory=list)
    error: Optional[str] = None
    failure: Optional[FailureKind] = None

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    def add_step(self, step: StepResult) -> bool:
        """Record a step, marking the detail failed if it did not succeed."""
        self.steps.append(step)
        if not step.ok:
            self.status = OperationStatus.FAILED
            self.failure = FailureKind.COMMAND
            self.error = f"{step.name} exited with status {step.returncode}"
        return step.ok

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'pod': self.pod_name,
            'action': self.action,
            'status': self.status.value,
            'steps': [step.to_dict() for step in self.steps],
        }
        if self.error:
            result['error'] = self.error
        if self.failure:
            result['failure'] = self.failure.value
        return result


@dataclass
class OperationResult:
    """
    Outcome of one public operation against a repository.

    Carries the operation's inputs (repository and pod names) alongside
    the per-pod details, so it doubles as the completion event.
    """
    operation: str  # e.g. "install_pods", "remove_pod", "update_all_pods"
    repository: str
    pods: List[str] = field(default_factory=list)
    details: List[PodOperationDetail] = field(default_factory=list)
    failure: Optional[FailureKind] = None
    error: Optional[str] = None
    regenerated: bool = False

    @property
    def success(self) -> bool:
        """True if the precondition held and no pod failed."""
        if self.failure is not None:
            return False
        return all(detail.ok for detail in self.details)

    @property
    def total(self) -> int:
        return len(self.details)

    @property
    def successful(self) -> int:
        return sum(1 for d in self.details if d.status == OperationStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for d in self.details if d.status == OperationStatus.FAILED)

    @property
    def errors(self) -> List[str]:
        errors = [f"{d.pod_name}: {d.error}" for d in self.details if d.error]
        if self.error:
            errors.insert(0, self.error)
        return errors

    def add_detail(self, detail: PodOperationDetail) -> None:
        self.details.append(detail)

    def fail(self, kind: FailureKind, message: str) -> 'OperationResult':
        """Mark the whole operation failed."""
        self.failure = kind
        self.error = message
        return self

    def failure_kind(self) -> Optional[FailureKind]:
        """The operation-level failure, or the first failed pod's."""
        if self.failure is not None:
            return self.failure
        for detail in self.details:
            if detail.failure is not None:
                return detail.failure
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'type': 'operation',
            'operation': self.operation,
            'repository': self.repository,
            'pods': list(self.pods),
            'success': self.success,
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'regenerated': self.regenerated,
            'details': [d.to_dict() for d in self.details],
        }
        kind = self.failure_kind()
        if kind:
            result['failure'] = kind.value
        if self.errors:
            result['errors'] = self.errors
        return result
