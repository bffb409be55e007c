"""Component Factory for strategy instantiation.

Builds the parser, template store, loader, editor and extractor strategies
from settings. Instances are cached for the life of the factory; the
application creates one factory per process and closes it on shutdown.
"""

import logging

from openai import AsyncOpenAI

from prompt_assembler.core.config import ConfigurationError, Settings, get_settings
from prompt_assembler.interfaces.extractor import BaseExtractor
from prompt_assembler.interfaces.parser import BaseParser
from prompt_assembler.interfaces.template_store import BaseTemplateStore
from prompt_assembler.strategies.extractors import OpenAIExtractor
from prompt_assembler.strategies.parsers import (
    DocxParser,
    PdfParser,
    SimpleTextParser,
    select_parser,
)
from prompt_assembler.strategies.stores import GitHubTemplateStore, LocalTemplateStore
from prompt_assembler.strategies.template_engine import TemplateEditor, TemplateLoader

logger = logging.getLogger(__name__)

OPENAI_KEY_MISSING = "OPENAI_API_KEY is not configured on the server."
GITHUB_CONFIG_MISSING = "GITHUB_TOKEN and GITHUB_REPO must be configured."


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        loader = factory.get_loader()
        template = await loader.load_template("target-artifact")
        data = await extract_placeholders(factory.get_extractor(), template, text)
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._parsers_cache: list[BaseParser] | None = None
        self._store_cache: BaseTemplateStore | None = None
        self._loader_cache: TemplateLoader | None = None
        self._editor_cache: TemplateEditor | None = None
        self._extractor_cache: BaseExtractor | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_parsers(self) -> list[BaseParser]:
        """Get all document parsers, in selection order."""
        if self._parsers_cache is None:
            logger.info("Instantiating parsers: text, pdf, docx")
            self._parsers_cache = [SimpleTextParser(), PdfParser(), DocxParser()]
        return self._parsers_cache

    def get_parser(self, filename: str) -> BaseParser:
        """Get the parser that handles ``filename``.

        Raises:
            UnsupportedFormatError: If no parser supports the file's extension.
        """
        return select_parser(filename, self.get_parsers())

    def get_template_store(self, store_type: str | None = None) -> BaseTemplateStore:
        """Get a template store instance based on the specified type.

        Args:
            store_type: The store type to instantiate. If None, uses settings.

        Returns:
            A BaseTemplateStore implementation instance.

        Raises:
            ConfigurationError: If the GitHub store is selected without credentials.
            ValueError: If the store type is unknown.
        """
        if self._store_cache is None or store_type is not None:
            store_type = store_type or self._settings.store_type

            logger.info(f"Instantiating template store: {store_type}")

            match store_type:
                case "local":
                    self._store_cache = LocalTemplateStore(self._settings.store_root)
                case "github":
                    if not self._settings.github_configured:
                        raise ConfigurationError(GITHUB_CONFIG_MISSING)
                    self._store_cache = GitHubTemplateStore(
                        repo=self._settings.github_repo,
                        token=self._settings.github_token,
                        branch=self._settings.github_branch,
                        api_url=self._settings.github_api_url,
                    )
                case _:
                    raise ValueError(
                        f"Unknown store type: {store_type}. "
                        f"Valid options: 'local', 'github'"
                    )

        return self._store_cache

    def get_loader(self) -> TemplateLoader:
        """Get the template loader bound to the configured store."""
        if self._loader_cache is None:
            self._loader_cache = TemplateLoader(
                self.get_template_store(), root=self._settings.templates_root
            )
        return self._loader_cache

    def get_editor(self) -> TemplateEditor:
        """Get the admin template editor."""
        if self._editor_cache is None:
            self._editor_cache = TemplateEditor(self.get_loader())
        return self._editor_cache

    def get_extractor(self) -> BaseExtractor:
        """Get the structured-extraction strategy.

        Raises:
            ConfigurationError: If no OpenAI API key is configured.
        """
        if self._extractor_cache is None:
            if not self._settings.openai_configured:
                raise ConfigurationError(OPENAI_KEY_MISSING)

            logger.info(f"Instantiating extractor: openai ({self._settings.llm_chat_model})")

            client = AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                timeout=self._settings.llm_timeout_seconds,
            )
            self._extractor_cache = OpenAIExtractor(
                client=client,
                model=self._settings.llm_chat_model,
                temperature=self._settings.llm_temperature,
            )

        return self._extractor_cache

    async def aclose(self) -> None:
        """Close network clients held by cached components."""
        if self._extractor_cache is not None:
            await self._extractor_cache.aclose()
        if self._store_cache is not None:
            await self._store_cache.aclose()
        self.clear_cache()

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        """
        self._parsers_cache = None
        self._store_cache = None
        self._loader_cache = None
        self._editor_cache = None
        self._extractor_cache = None
        logger.debug("Component factory cache cleared")
