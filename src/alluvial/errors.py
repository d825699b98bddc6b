"""Exceptions raised by the alluvial core."""


class AlluvialError(Exception):
    """Base class for alluvial diagram errors."""


class ConfigurationError(AlluvialError):
    """Invalid layout option or diagram configuration."""


class DuplicateNetworkError(ConfigurationError):
    """A network with the same id is already part of the diagram."""


class MissingParentError(AlluvialError):
    """An operation needs an owning parent node that is not there."""
