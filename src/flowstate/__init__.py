"""flowstate: command-sourced project planning with an allocation forecast."""

__version__ = "0.1.0"
