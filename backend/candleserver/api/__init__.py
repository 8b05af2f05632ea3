"""HTTP transport for the indicator engine."""
