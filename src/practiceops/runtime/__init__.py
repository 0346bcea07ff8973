"""Dependency orchestration and deployment status components."""

from practiceops.runtime.commands import CommandResult, CommandRunner, run_command
from practiceops.runtime.dependencies import (
	DependencyLifecycleController,
	DiagnosticClass,
	classify_diagnostic,
)
from practiceops.runtime.deployment import (
	DeploymentDetector,
	resolve_manifest_path,
	resolve_repo_root,
)
from practiceops.runtime.probe import (
	ContainerProbe,
	ContainerProber,
	ContainerProbeResult,
	ProbeState,
	parse_inspect_output,
)

__all__ = [
	"CommandResult",
	"CommandRunner",
	"ContainerProbe",
	"ContainerProbeResult",
	"ContainerProber",
	"DependencyLifecycleController",
	"DeploymentDetector",
	"DiagnosticClass",
	"ProbeState",
	"classify_diagnostic",
	"parse_inspect_output",
	"resolve_manifest_path",
	"resolve_repo_root",
	"run_command",
]
