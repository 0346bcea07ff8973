"""Server lifecycle and snapshot manager for the practice-management API."""

from practiceops.runtime.controller import ServerLifecycleController

__version__ = "0.1.0"

__all__ = [
	"ServerLifecycleController",
	"__version__",
]
