"""
License decisions layer.

Records which packages and licenses a project has decided on, resolves
version-scoped licenses and inherited decision files, and round-trips
everything through an operation log.
"""
from .errors import (
    DecisionsError,
    DeprecatedSyntaxError,
    FetchError,
    InheritanceCycleError,
    MalformedDecisionsError,
    UnresolvedSecretError,
)
from .models import Approval, DecisionState, Package, PackageDecision
from .operations import Operation, apply_operation
from .decisions import Decisions


__all__ = [
    'Approval',
    'Decisions',
    'DecisionsError',
    'DecisionState',
    'DeprecatedSyntaxError',
    'FetchError',
    'InheritanceCycleError',
    'MalformedDecisionsError',
    'Operation',
    'Package',
    'PackageDecision',
    'UnresolvedSecretError',
    'apply_operation',
]
