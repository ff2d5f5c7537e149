"""
Error taxonomy for the credibility engine.

Only InputError ever leaves the engine. Signal failures are logged and folded
into the result as unavailable signals.
"""


class CredibilityError(Exception):
    """Base class for engine errors."""


class InputError(CredibilityError, ValueError):
    """Raised when a request carries no analysable text."""


class SignalUnavailable(CredibilityError):
    """A single signal (classifier, fact-check) could not be produced."""


class ConfigurationMissing(SignalUnavailable):
    """A signal needs a credential that is not configured."""


class ClassifierError(SignalUnavailable):
    """Raised by classifier implementations when inference cannot run."""
