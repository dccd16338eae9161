"""OpenPRD - turn a product idea into a structured PRD with your own LLM key.

Example:
    >>> from openprd.llm import get_registry
    >>> registry = get_registry()
    >>> registry.list_providers()
    ['openai', 'anthropic', 'google', 'openrouter', 'deepseek', 'moonshot', 'zai']
"""

__version__ = "0.1.0"
