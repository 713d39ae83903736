"""
Pytest configuration for avbuild test suite.

Integration tests drive the whole pipeline against fake external tools
(shell scripts). They are marked `integration`; pass --full to make sure
they run when the marker expression excludes them.
"""


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Configure pytest based on command-line options."""
    config.addinivalue_line(
        "markers", "integration: drives the whole pipeline with fake external tools"
    )
    if config.getoption("--full"):
        markexpr = config.getoption("-m", "")
        if markexpr == "not integration":
            config.option.markexpr = ""
