"""Developer-facing tools."""
