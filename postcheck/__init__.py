"""postcheck package.

A black-box contract verifier for json-server-auth style REST APIs.
Registers a random account, logs in, and checks the CRUD behaviour of
the posts resource.
"""

__version__ = "0.1.0"
__description__ = "Black-box contract checks for a posts REST API"

# Re-export main classes for convenience
from .client import ApiResponse, PostsClient
from .config import Settings, load_settings
from .auth import SessionBootstrapper
from .runner import ScenarioResult, SuiteReport, SuiteRunner
from .scenarios import Scenario, ScenarioContext, all_scenarios, select_scenarios
from .exceptions import (
    PostCheckError,
    ConfigError,
    SetupError,
    ExpectationError,
    RequestFailedError,
    ValidationError,
)

__all__ = [
    "__version__",
    "__description__",
    "ApiResponse",
    "PostsClient",
    "Settings",
    "load_settings",
    "SessionBootstrapper",
    "ScenarioResult",
    "SuiteReport",
    "SuiteRunner",
    "Scenario",
    "ScenarioContext",
    "all_scenarios",
    "select_scenarios",
    "PostCheckError",
    "ConfigError",
    "SetupError",
    "ExpectationError",
    "RequestFailedError",
    "ValidationError",
]
