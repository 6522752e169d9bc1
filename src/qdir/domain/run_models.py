from __future__ import annotations

"""
Run Domain Data Models.

Defines the result object passed from the run orchestrator to the CLI
renderers, together with its factory functions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from qdir.domain.constants import EXIT_FAILURE, EXIT_OK
from qdir.domain.traversal_models import TraversalResult

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RunResult:
    """
    Unified result of a complete qdir invocation.

    Attributes:
        ok: Flag indicating success or failure.
        exit_code: Process exit status to report.
        error: Descriptive message in case of failure.
        queue_name: Target list on the backend.
        dry_run: Whether pushes were simulated.
        roots: Per-root traversal outcomes, in processing order.
    """
    ok: bool
    exit_code: int
    error: str
    queue_name: str
    dry_run: bool = False
    roots: List[TraversalResult] = field(default_factory=list)

    @property
    def total_queued(self) -> int:
        return sum(r.queued for r in self.roots)

    def summary(self) -> Dict[str, Any]:
        """Aggregate counters across every processed root."""
        return {
            "queued": self.total_queued,
            "skipped_hidden": sum(r.skipped_hidden for r in self.roots),
            "links": sum(r.links for r in self.roots),
            "errors": sum(r.errors for r in self.roots),
            "failed_publishes": sum(len(r.failed_publishes) for r in self.roots),
        }

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        queue_name: str,
        roots: Optional[List[TraversalResult]] = None,
        exit_code: int = EXIT_FAILURE,
        dry_run: bool = False,
) -> RunResult:
    """
    Create a failed run result.

    Args:
        error: Detailed error description.
        queue_name: Target list name.
        roots: Roots processed (fully or partially) before the failure.
        exit_code: Non-zero status to report.
        dry_run: Whether pushes were simulated.

    Returns:
        RunResult: An immutable error result object.
    """
    return RunResult(
        ok=False,
        exit_code=exit_code,
        error=error,
        queue_name=queue_name,
        dry_run=dry_run,
        roots=list(roots or []),
    )


def create_success_result(
        queue_name: str,
        roots: List[TraversalResult],
        dry_run: bool = False,
) -> RunResult:
    """Create a successful run result."""
    return RunResult(
        ok=True,
        exit_code=EXIT_OK,
        error="",
        queue_name=queue_name,
        dry_run=dry_run,
        roots=list(roots),
    )
