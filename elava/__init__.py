"""Cloud resource drift detection: compare, decide, log and find untracked resources."""

__version__ = "0.1.0"