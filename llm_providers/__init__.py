"""LLM provider layer: local candle engine and HTTP providers behind one interface."""

__version__ = "0.1.0"
