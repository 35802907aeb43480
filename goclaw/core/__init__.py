"""Configuration, error types and the model client."""
