"""Concrete template store implementations."""

from prompt_assembler.strategies.stores.github import GitHubTemplateStore
from prompt_assembler.strategies.stores.local import LocalTemplateStore

__all__ = [
    "GitHubTemplateStore",
    "LocalTemplateStore",
]
