"""Exceptions raised by the template engine."""


class TemplateSyntaxError(Exception):
    """Raised when block text contains malformed repeat-group markup."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class AssemblyError(Exception):
    """Raised when a template cannot be assembled."""


class BlockCountMismatchError(AssemblyError):
    """Raised when metadata blocks and supplied block contents do not line up."""


class InvalidTemplateError(Exception):
    """Raised when template metadata fails validation."""


class TemplateNotFoundError(Exception):
    """Raised when no template exists for a slug."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f'Template "{slug}" not found')
