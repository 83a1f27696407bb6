"""Input validation, host-name resolution and the shared worker pool."""
