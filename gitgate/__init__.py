"""gitgate: pluggable git hook checks with a single accept/reject decision."""

__version__ = "0.1.0"
