"""GitHub pull-request activity report for a set of authors."""

__version__ = "0.1.0"
