"""In-memory query engine over a parsed games collection."""
