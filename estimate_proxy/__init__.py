"""Estimate Proxy: multi-provider LLM request normalizer."""

__version__ = "0.1.0"
