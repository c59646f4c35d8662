"""Building blocks for a GraphQL-to-REST gateway: validation, templates, data loading, evaluation and SDL printing."""

__version__ = "0.1.0"