"""rulegate: state-gated, first-failure-wins validation of named fields."""

__version__ = "0.1.0"
