"""
Pytest configuration for the xcpack test suite.

Integration tests invoke the installed `xcpack` command and are excluded by
default; pass --full to run them.
"""


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests",
    )


def pytest_configure(config):
    """Drop the default 'not integration' marker expression when --full is given."""
    if config.getoption("--full"):
        markexpr = config.getoption("-m", "")
        if markexpr == "not integration":
            config.option.markexpr = ""
