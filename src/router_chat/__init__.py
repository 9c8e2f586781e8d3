"""router-chat -- terminal chat client for OpenAI-compatible aggregators with cost tracking."""

__version__ = '0.3.0'
