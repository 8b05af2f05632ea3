"""Application core: configuration."""
