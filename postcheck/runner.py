"""Sequential suite runner.

Runs setup once, then every selected scenario in order. A setup failure
aborts the run before any scenario starts. A scenario failure is recorded
and the run moves on to the next scenario.
"""

import random
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field
from typing_extensions import Literal

from .auth import SessionBootstrapper
from .client import PostsClient
from .exceptions import ExpectationError, PostCheckError, SetupError, format_error_for_user
from .scenarios import Scenario, ScenarioContext, select_scenarios


class ScenarioResult(BaseModel):
    """Outcome of one scenario."""

    number: int
    title: str
    status: Literal["passed", "failed"]
    duration: float = 0.0
    error: Optional[str] = None
    expected: Any = None
    actual: Any = None

    @property
    def passed(self) -> bool:
        return self.status == "passed"


class SuiteReport(BaseModel):
    """Outcome of a whole run."""

    base_url: str
    account: Optional[str] = None
    setup_error: Optional[str] = None
    results: List[ScenarioResult] = Field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return self.setup_error is not None

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def ok(self) -> bool:
        return not self.aborted and self.failed == 0

    def summary(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "account": self.account,
            "aborted": self.aborted,
            "setup_error": self.setup_error,
            "passed": self.passed,
            "failed": self.failed,
            "total": len(self.results),
        }


class SuiteRunner:
    """Runs the contract scenarios against one API."""

    def __init__(
        self,
        client: PostsClient,
        scenarios: Optional[List[Scenario]] = None,
        rng: Optional[random.Random] = None,
        debug: bool = False,
        on_result: Optional[Callable[[ScenarioResult], None]] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            client: Client for the API under test
            scenarios: Scenarios to run. All registered scenarios if None.
            rng: Random source for generated accounts and posts
            debug: Include response bodies in failure messages
            on_result: Called after each scenario finishes
        """
        self.client = client
        self.scenarios = scenarios if scenarios is not None else select_scenarios()
        self.rng = rng
        self.debug = debug
        self.on_result = on_result

    def run_scenario(self, scenario: Scenario, context: ScenarioContext) -> ScenarioResult:
        """Run one scenario and record its outcome."""
        start = time.monotonic()
        try:
            scenario.run(context)
        except ExpectationError as e:
            return ScenarioResult(
                number=scenario.number,
                title=scenario.title,
                status="failed",
                duration=time.monotonic() - start,
                error=format_error_for_user(e, self.debug),
                expected=e.expected,
                actual=e.actual,
            )
        except PostCheckError as e:
            return ScenarioResult(
                number=scenario.number,
                title=scenario.title,
                status="failed",
                duration=time.monotonic() - start,
                error=format_error_for_user(e, self.debug),
            )

        return ScenarioResult(
            number=scenario.number,
            title=scenario.title,
            status="passed",
            duration=time.monotonic() - start,
        )

    def run(self) -> SuiteReport:
        """Run setup and all scenarios.

        Returns:
            Report of the run. If setup failed, ``setup_error`` is set and
            no scenario results are recorded.
        """
        report = SuiteReport(base_url=self.client.url)

        bootstrapper = SessionBootstrapper(self.client, rng=self.rng)
        try:
            session = bootstrapper.bootstrap()
        except SetupError as e:
            report.account = bootstrapper.account.email if bootstrapper.account else None
            report.setup_error = format_error_for_user(e, self.debug)
            return report

        report.account = bootstrapper.account.email
        context = ScenarioContext(client=self.client, session=session, rng=self.rng)

        for scenario in self.scenarios:
            result = self.run_scenario(scenario, context)
            report.results.append(result)
            if self.on_result:
                self.on_result(result)

        return report
