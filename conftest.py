"""Local pytest configuration used by the client test suites."""

pytest_plugins = ["pytest_plugins.logging.logging"]
