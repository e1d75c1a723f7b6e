"""HTTP API: streaming agent endpoint and conversation persistence routes."""
