"""Exceptions raised by prompt-plus."""


class PromptPlusError(Exception):
    """Base class for prompt-plus errors."""


class ConfigParseError(PromptPlusError):
    """The config file exists but is not a valid JSON object."""


class NotFoundError(PromptPlusError):
    """A named repository or template does not exist."""


class AlreadyExistsError(PromptPlusError):
    """A repository name is taken, or the config is already initialized."""


class TemplateParseError(PromptPlusError):
    """A single template file could not be parsed."""


class SyncError(PromptPlusError):
    """A git clone or pull failed."""
