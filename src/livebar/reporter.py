"""
Terminal reporter that drives the live progress bar from pytest hooks.

The standard reporter still owns the header, the collection line and the
final summary. Everything between collection and the summary (the per-test
letters and the failure sections) is replaced by the bar and by failure
reports printed inline as they happen.
"""

from __future__ import annotations

import logging
import os
import sys
import warnings
from typing import Dict, List, Mapping, Optional, TextIO, Tuple

import pytest
from _pytest.reports import BaseReport, TestReport
from _pytest.terminal import TerminalReporter

from .config.options import load_config
from .services.run_aggregator import RunAggregator

logger = logging.getLogger(__name__)

REPORT_INDENT = " " * 5


def duplicate_stream(file: TextIO) -> Tuple[TextIO, bool]:
    """
    Open a second handle on the stream's file descriptor.

    pytest redirects file descriptors 1 and 2 while a test runs, so a
    background refresh written to sys.stdout would end up in the test's
    captured output. A duplicate of the original descriptor still points
    at the terminal.

    Args:
        file: Stream the terminal reporter writes to

    Returns:
        (stream, owned) where owned is True if the caller must close it
    """
    try:
        fd = file.fileno()
    except (AttributeError, OSError, ValueError):
        return file, False
    encoding = getattr(file, "encoding", None) or "utf-8"
    stream = os.fdopen(os.dup(fd), "w", encoding=encoding, errors="replace")
    return stream, True


class LivebarReporter(TerminalReporter):
    """TerminalReporter that shows a progress bar instead of progress letters."""

    def __init__(
        self,
        config: pytest.Config,
        file: Optional[TextIO] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        file = file if file is not None else sys.stdout
        super().__init__(config, file)
        self.livebar_config = load_config(
            config, color_enabled=self.hasmarkup, environ=environ
        )
        self._bar_stream, self._owns_stream = duplicate_stream(file)
        self.aggregator = RunAggregator(self._bar_stream, self.livebar_config)
        self._run_active = False
        self._unit_reports: Dict[str, List[TestReport]] = {}
        self._failure_index = 0

    def pytest_collection_finish(self, session: pytest.Session) -> None:
        super().pytest_collection_finish(session)
        if self.config.getoption("collectonly"):
            return
        self._tw.line()
        self.flush()
        self.aggregator.on_run_start(len(session.items))
        self._run_active = True

    def pytest_runtest_logstart(
        self, nodeid: str, location: Tuple[str, Optional[int], str]
    ) -> None:
        self._unit_reports[nodeid] = []
        if self._run_active:
            self.aggregator.on_unit_start()

    def pytest_runtest_logreport(self, report: TestReport) -> None:
        self._tests_ran = True
        category = self.config.hook.pytest_report_teststatus(
            report=report, config=self.config
        )[0]
        self._add_stats(category, [report])
        self._unit_reports.setdefault(report.nodeid, []).append(report)

    def pytest_runtest_logfinish(
        self, nodeid: str, location: Tuple[str, Optional[int], str]
    ) -> None:
        reports = self._unit_reports.pop(nodeid, [])
        if not self._run_active:
            return
        failed = [rep for rep in reports if rep.failed]
        if failed:
            self.aggregator.on_unit_fail(self._failure_report(failed))
        elif any(rep.skipped for rep in reports):
            self.aggregator.on_unit_pending()
        else:
            fspath, lineno, _ = location
            line = lineno + 1 if lineno is not None else 0
            self.aggregator.on_unit_pass(
                elapsed=sum(rep.duration for rep in reports),
                description=nodeid,
                location=f"{fspath}:{line}",
            )

    def pytest_warning_recorded(
        self, warning_message: warnings.WarningMessage, nodeid: str
    ) -> None:
        super().pytest_warning_recorded(warning_message, nodeid)
        if self._run_active:
            category = warning_message.category.__name__
            self.aggregator.on_message(
                f"{warning_message.filename}:{warning_message.lineno}: "
                f"{category}: {warning_message.message}"
            )

    def pytest_enter_pdb(self, config: pytest.Config, pdb) -> None:
        self.aggregator.suspend_ticker()

    @pytest.hookimpl(wrapper=True)
    def pytest_sessionfinish(self, session: pytest.Session, exitstatus):
        if self._run_active:
            self.aggregator.on_run_close()
            self._run_active = False
        return (yield from super().pytest_sessionfinish(session, exitstatus))

    def summary_failures(self) -> None:
        # Printed inline as each test finished.
        pass

    def summary_errors(self) -> None:
        """Show collection errors only; errors during a test were printed inline."""
        if self.config.option.tbstyle == "no":
            return
        reports = [rep for rep in self.getreports("error") if rep.when == "collect"]
        if not reports:
            return
        self.write_sep("=", "ERRORS")
        for rep in reports:
            msg = "ERROR collecting " + self._getfailureheadline(rep)
            self.write_sep("_", msg, red=True, bold=True)
            self._outrep_summary(rep)

    def pytest_unconfigure(self) -> None:
        super().pytest_unconfigure()
        if self._run_active:
            self.aggregator.on_run_close()
            self._run_active = False
        if self._owns_stream:
            self._bar_stream.close()
            self._owns_stream = False

    def _failure_report(self, failed: List[BaseReport]) -> str:
        self._failure_index += 1
        first = failed[0]
        headline = self._getfailureheadline(first)
        if first.when != "call":
            headline = f"ERROR at {first.when} of {headline}"

        lines = [f"  {self._failure_index}) {headline}"]
        for rep in failed:
            lines.extend(REPORT_INDENT + text for text in rep.longreprtext.splitlines())
        lines.extend(self._captured_sections(failed[-1]))
        logger.debug(f"Failure #{self._failure_index}: {first.nodeid}")
        return "\n".join(lines)

    def _captured_sections(self, report: BaseReport) -> List[str]:
        showcapture = self.config.option.showcapture
        if showcapture == "no":
            return []
        lines = []
        for name, content in report.sections:
            if showcapture != "all" and showcapture not in name:
                continue
            lines.append(f"{REPORT_INDENT}--- {name} ---")
            lines.extend(REPORT_INDENT + text for text in content.rstrip("\n").splitlines())
        return lines
