"""Games database text format: record schema, field conversion and the block parser."""
