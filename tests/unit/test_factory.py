"""Unit tests for settings and the component factory."""

import asyncio

import pytest

from prompt_assembler.core.config import ConfigurationError, Settings
from prompt_assembler.core.factory import ComponentFactory
from prompt_assembler.strategies.extractors import OpenAIExtractor
from prompt_assembler.strategies.parsers import DocxParser
from prompt_assembler.strategies.stores import GitHubTemplateStore, LocalTemplateStore


def _settings(tmp_path, **overrides) -> Settings:
    values = {
        "store_root": tmp_path,
        "log_dir": None,
        "openai_api_key": "",
        "github_token": "",
        "github_repo": "",
    }
    values.update(overrides)
    return Settings(**values)


class TestSettings:
    """Test suite for Settings."""

    def test_log_level_upper_cased(self, tmp_path):
        """Test that log levels are normalized."""
        assert _settings(tmp_path, log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "key, configured",
        [("", False), ("   ", False), ("your-openai-api-key-here", False), ("sk-test", True)],
    )
    def test_openai_configured(self, tmp_path, key, configured):
        """Test that blank and placeholder keys count as unconfigured."""
        assert _settings(tmp_path, openai_api_key=key).openai_configured is configured


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    def test_components_are_cached(self, tmp_path):
        """Test that repeated lookups return the same instances."""
        factory = ComponentFactory(_settings(tmp_path))

        assert factory.get_loader() is factory.get_loader()
        assert factory.get_editor() is factory.get_editor()
        assert isinstance(factory.get_template_store(), LocalTemplateStore)

    def test_parser_lookup(self, tmp_path):
        """Test that parsers are selected by file name."""
        factory = ComponentFactory(_settings(tmp_path))

        assert isinstance(factory.get_parser("brief.docx"), DocxParser)

    def test_extractor_requires_key(self, tmp_path):
        """Test that a missing API key is a configuration error."""
        factory = ComponentFactory(_settings(tmp_path))

        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY is not configured"):
            factory.get_extractor()

    def test_extractor_built_once(self, tmp_path):
        """Test that the extractor and its client are created once."""
        factory = ComponentFactory(_settings(tmp_path, openai_api_key="sk-test"))

        extractor = factory.get_extractor()

        assert isinstance(extractor, OpenAIExtractor)
        assert factory.get_extractor() is extractor
        asyncio.run(factory.aclose())

    def test_github_requires_credentials(self, tmp_path):
        """Test that the GitHub store needs a token and repository."""
        factory = ComponentFactory(_settings(tmp_path, store_type="github"))

        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN and GITHUB_REPO"):
            factory.get_loader()

    def test_github_store(self, tmp_path):
        """Test that configured credentials select the GitHub store."""
        factory = ComponentFactory(
            _settings(tmp_path, store_type="github", github_token="t", github_repo="acme/prompts")
        )

        assert isinstance(factory.get_template_store(), GitHubTemplateStore)
        asyncio.run(factory.aclose())

    def test_unknown_store_type(self, tmp_path):
        """Test that an unknown store type is rejected."""
        factory = ComponentFactory(_settings(tmp_path))

        with pytest.raises(ValueError, match="Unknown store type: s3"):
            factory.get_template_store("s3")
