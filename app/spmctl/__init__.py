"""spmctl - package status tracker for the Shusmo package catalog."""

__version__ = "0.1.0"
