"""Core services for spmctl: catalog store, poller, reconciler and configuration."""
