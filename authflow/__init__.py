"""authflow: account lifecycle use cases (signup, login, activation, password reset)."""

__version__ = "0.1.0"
