"""DevOps Metrics - incremental GitHub pull request sync."""

__version__ = "0.1.0"
