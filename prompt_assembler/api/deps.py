"""FastAPI dependencies for dependency injection.

Routes get their strategies from the ComponentFactory stored on the
application state, so tests can swap any of them through
``app.dependency_overrides``.
"""

import logging

from fastapi import Depends, HTTPException, Request, status

from prompt_assembler.core.config import ConfigurationError
from prompt_assembler.core.factory import ComponentFactory
from prompt_assembler.interfaces.extractor import BaseExtractor
from prompt_assembler.interfaces.parser import BaseParser
from prompt_assembler.strategies.template_engine import TemplateEditor, TemplateLoader

logger = logging.getLogger(__name__)


def get_factory(request: Request) -> ComponentFactory:
    """Return the application's component factory."""
    return request.app.state.factory


def _configuration_error(e: ConfigurationError) -> HTTPException:
    logger.error(f"Configuration error: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


def get_loader(factory: ComponentFactory = Depends(get_factory)) -> TemplateLoader:
    """Dependency for the template loader.

    Raises:
        HTTPException: 500 if the configured store lacks credentials.
    """
    try:
        return factory.get_loader()
    except ConfigurationError as e:
        raise _configuration_error(e) from e


def get_editor(factory: ComponentFactory = Depends(get_factory)) -> TemplateEditor:
    """Dependency for the admin template editor.

    Raises:
        HTTPException: 500 if the configured store lacks credentials.
    """
    try:
        return factory.get_editor()
    except ConfigurationError as e:
        raise _configuration_error(e) from e


def get_extractor(factory: ComponentFactory = Depends(get_factory)) -> BaseExtractor:
    """Dependency for the structured extractor.

    Raises:
        HTTPException: 500 if no OpenAI API key is configured.
    """
    try:
        return factory.get_extractor()
    except ConfigurationError as e:
        raise _configuration_error(e) from e


def get_parsers(factory: ComponentFactory = Depends(get_factory)) -> list[BaseParser]:
    """Dependency for the document parsers."""
    return factory.get_parsers()
