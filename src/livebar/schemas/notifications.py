"""
Lifecycle notifications delivered by the test runner.

Each notification is immutable and consumed once by the run aggregator.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Notification(BaseModel):
    model_config = ConfigDict(frozen=True)


class RunStarted(_Notification):
    """A run is about to execute `expected_total` tests."""

    kind: Literal["run_started"] = "run_started"
    expected_total: int = Field(..., ge=0, description="Number of collected tests")


class UnitStarted(_Notification):
    """A single test is about to run."""

    kind: Literal["unit_started"] = "unit_started"


class UnitPassed(_Notification):
    """
    A test passed.

    Attributes:
        elapsed: Seconds the test took. When omitted the aggregator measures
            the time since the last UnitStarted.
        description: Human readable test name, used in slow-test warnings.
        location: Source location of the test, used in slow-test warnings.
    """

    kind: Literal["unit_passed"] = "unit_passed"
    elapsed: Optional[float] = Field(None, ge=0)
    description: str = ""
    location: str = ""


class UnitPending(_Notification):
    """A test was skipped or is expected to fail."""

    kind: Literal["unit_pending"] = "unit_pending"


class UnitFailed(_Notification):
    """A test failed; `report` is the fully formatted failure text."""

    kind: Literal["unit_failed"] = "unit_failed"
    report: str = Field(..., description="Externally formatted failure report")


class Message(_Notification):
    """Free-form text to show without breaking the bar."""

    kind: Literal["message"] = "message"
    text: str


class RunClosed(_Notification):
    """The run is over; no more notifications follow."""

    kind: Literal["run_closed"] = "run_closed"


Notification = Annotated[
    Union[
        RunStarted,
        UnitStarted,
        UnitPassed,
        UnitPending,
        UnitFailed,
        Message,
        RunClosed,
    ],
    Field(discriminator="kind"),
]
