"""OpenAI API compatible mock server with latency injection."""

__version__ = "1.0.0"
