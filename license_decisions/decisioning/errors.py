"""
Exception taxonomy for the decisions layer.

Rule store mutations never raise. Everything here comes from reading
decisions (persisted logs, inherited sources) or from resolving the
secrets and files those sources point at.
"""

DEPRECATED_SYNTAX_MESSAGE = (
    "The decisions file seems to have whitelist/blacklist keys which are deprecated. "
    "Please replace them with permit/restrict respectively and try again! More info - "
    "https://github.com/pivotal/LicenseFinder/commit/a40b22fda11b3a0efbb3c0a021381534bc998dd9"
)


class DecisionsError(RuntimeError):
    """Base class for all decisions errors."""


class DeprecatedSyntaxError(DecisionsError):
    """Raised when a decisions file uses a retired operation name."""

    def __init__(self, operation: str):
        super().__init__(DEPRECATED_SYNTAX_MESSAGE)
        self.operation = operation


class MalformedDecisionsError(DecisionsError):
    """Raised when persisted decisions cannot be parsed into operations."""


class UnresolvedSecretError(DecisionsError):
    """Raised when an authorization value references an unset environment variable."""

    def __init__(self, variable: str):
        super().__init__(
            f"Environment variable ${variable} referenced in inheritance authorization is not set"
        )
        self.variable = variable


class FetchError(DecisionsError):
    """Raised when an inherited decisions source cannot be loaded."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Unable to load inherited decisions from {source}: {reason}")
        self.source = source
        self.reason = reason


class InheritanceCycleError(DecisionsError):
    """Raised when a decisions source inherits from itself, directly or transitively."""

    def __init__(self, chain):
        super().__init__(
            "Inheritance cycle detected: " + " -> ".join(str(source) for source in chain)
        )
        self.chain = list(chain)
