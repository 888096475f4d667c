"""
pytest entry point for livebar.

Registered through the ``pytest11`` entry point, or explicitly with
``-p livebar.plugin``. Nothing changes unless the bar is enabled with
``--livebar`` or the ``livebar`` ini key.
"""

import pytest

from .config.options import add_options, livebar_enabled
from .reporter import LivebarReporter
from .utils.logging import setup_logging


def pytest_addoption(parser: pytest.Parser) -> None:
    add_options(parser)


@pytest.hookimpl(trylast=True)
def pytest_configure(config: pytest.Config) -> None:
    """Swap the standard terminal reporter for LivebarReporter."""
    if not livebar_enabled(config):
        return
    if hasattr(config, "workerinput"):
        # xdist workers report to the controller, not to a terminal
        return

    setup_logging(verbose=config.option.verbose >= 2)

    standard = config.pluginmanager.getplugin("terminalreporter")
    if standard is None:
        # -p no:terminal
        return
    reporter = LivebarReporter(config)
    config.pluginmanager.unregister(standard)
    config.pluginmanager.register(reporter, "terminalreporter")
