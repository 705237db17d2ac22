"""
Operations and the reducer that folds them into DecisionState.

Each mutating call on Decisions is captured as an Operation. Persisted
decisions are an ordered list of operations, and the current state is
whatever apply_operation() produces when replaying that list.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from licensing import find_by_name
from .errors import DeprecatedSyntaxError, MalformedDecisionsError
from .models import Approval, DecisionState


logger = logging.getLogger(__name__)

INHERIT_FROM = 'inherit_from'

# Retired aliases of permit/restrict
DEPRECATED_OPERATIONS = frozenset({'whitelist', 'blacklist'})

# Transaction metadata any operation may carry. Only approve folds it into state.
TXN_KEYS = frozenset({'who', 'why', 'when'})

# Version numbers may be written unquoted in YAML
SCALAR_TYPES = (str, int, float)

# name -> (min positional, max positional, extra keyword arguments)
OPERATION_SIGNATURES: Dict[str, Tuple[int, int, frozenset]] = {
    'add_package': (1, 2, frozenset()),
    'remove_package': (1, 1, frozenset()),
    'license': (2, 2, frozenset({'versions'})),
    'unlicense': (1, 2, frozenset({'versions'})),
    'approve': (1, 1, frozenset({'versions'})),
    'unapprove': (1, 1, frozenset()),
    'homepage': (2, 2, frozenset()),
    'ignore': (1, 1, frozenset()),
    'heed': (1, 1, frozenset()),
    'ignore_group': (1, 1, frozenset()),
    'heed_group': (1, 1, frozenset()),
    'permit': (1, 1, frozenset()),
    'unpermit': (1, 1, frozenset()),
    'restrict': (1, 1, frozenset()),
    'unrestrict': (1, 1, frozenset()),
    'name_project': (1, 1, frozenset()),
    'unname_project': (0, 0, frozenset()),
    INHERIT_FROM: (1, 1, frozenset()),
}


@dataclass
class Operation:
    """A single recorded mutation: name, positional args, keyword args."""
    name: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> List[Any]:
        """Serializable form: [name, *args] plus a trailing mapping if kwargs are present."""
        record = [self.name, *self.args]
        if self.kwargs:
            record.append(dict(self.kwargs))
        return record

    @classmethod
    def from_record(cls, record: Any) -> 'Operation':
        """
        Build an operation from a persisted record.

        Raises:
            DeprecatedSyntaxError: For whitelist/blacklist records
            MalformedDecisionsError: For anything that is not a known operation
        """
        if not isinstance(record, (list, tuple)) or not record:
            raise MalformedDecisionsError(f"Decision record must be a non-empty list, got: {record!r}")

        name = _symbol(record[0])
        if name in DEPRECATED_OPERATIONS:
            raise DeprecatedSyntaxError(name)
        if name not in OPERATION_SIGNATURES:
            raise MalformedDecisionsError(f"Unknown decision operation: {record[0]!r}")

        args = list(record[1:])
        kwargs = {}
        # inherit_from's source may itself be a mapping
        has_options = args and isinstance(args[-1], dict) and (name != INHERIT_FROM or len(args) > 1)
        if has_options:
            kwargs = {_symbol(key): value for key, value in args.pop().items()}

        min_args, max_args, extra_keys = OPERATION_SIGNATURES[name]
        if not min_args <= len(args) <= max_args:
            raise MalformedDecisionsError(
                f"Operation {name} expects {min_args}-{max_args} arguments, got {len(args)}: {record!r}"
            )
        unknown = set(kwargs) - extra_keys - TXN_KEYS
        if unknown:
            raise MalformedDecisionsError(
                f"Operation {name} got unexpected options {sorted(unknown)}: {record!r}"
            )

        for index, value in enumerate(args):
            if not _valid_argument(name, index, min_args, value):
                raise MalformedDecisionsError(
                    f"Operation {name} argument {index + 1} must be a string, got {value!r}: {record!r}"
                )
        if name == 'add_package' and len(args) > 1 and args[1] is not None:
            args[1] = str(args[1])

        versions = kwargs.get('versions')
        if versions is not None:
            if not isinstance(versions, list) or not all(isinstance(v, SCALAR_TYPES) for v in versions):
                raise MalformedDecisionsError(
                    f"Operation {name} versions must be a list of version strings, got {versions!r}"
                )

        return cls(name=name, args=tuple(args), kwargs=kwargs)


def _valid_argument(name: str, index: int, min_args: int, value: Any) -> bool:
    if name == INHERIT_FROM:
        return isinstance(value, (str, dict))
    if value is None:
        return index >= min_args
    # add_package's version may be written as a bare YAML number
    if name == 'add_package' and index == 1:
        return isinstance(value, SCALAR_TYPES)
    return isinstance(value, str)


def _symbol(value: Any) -> str:
    """Operation names and option keys may be written as ':name'."""
    text = str(value)
    return text[1:] if text.startswith(':') else text


def _versions(operation: Operation) -> List[str]:
    return [str(v) for v in (operation.kwargs.get('versions') or [])]


def _arg(operation: Operation, index: int) -> Optional[Any]:
    return operation.args[index] if len(operation.args) > index else None


def _add_package(state: DecisionState, op: Operation) -> None:
    package = state.package(op.args[0])
    version = _arg(op, 1)
    if version not in package.versions:
        package.versions.append(version)


def _remove_package(state: DecisionState, op: Operation) -> None:
    state.packages.pop(op.args[0], None)


def _license(state: DecisionState, op: Operation) -> None:
    state.package(op.args[0]).add_license(find_by_name(op.args[1]), _versions(op))


def _unlicense(state: DecisionState, op: Operation) -> None:
    package = state.find_package(op.args[0])
    if package is None:
        return
    raw_license = _arg(op, 1)
    license_ = find_by_name(raw_license) if raw_license is not None else None
    package.remove_license(license_, _versions(op))


def _approve(state: DecisionState, op: Operation) -> None:
    package = state.package(op.args[0])
    versions = list(package.approval.versions) if package.approval else []
    for version in _versions(op):
        if version not in versions:
            versions.append(version)
    package.approval = Approval(
        who=op.kwargs.get('who'),
        why=op.kwargs.get('why'),
        when=op.kwargs.get('when'),
        versions=versions,
    )


def _unapprove(state: DecisionState, op: Operation) -> None:
    package = state.find_package(op.args[0])
    if package is not None:
        package.approval = None


def _homepage(state: DecisionState, op: Operation) -> None:
    state.package(op.args[0]).homepage = op.args[1]


def _ignore(state: DecisionState, op: Operation) -> None:
    state.package(op.args[0]).ignored = True


def _heed(state: DecisionState, op: Operation) -> None:
    package = state.find_package(op.args[0])
    if package is not None:
        package.ignored = False


def _ignore_group(state: DecisionState, op: Operation) -> None:
    state.ignored_groups.add(op.args[0])


def _heed_group(state: DecisionState, op: Operation) -> None:
    state.ignored_groups.discard(op.args[0])


def _permit(state: DecisionState, op: Operation) -> None:
    state.permitted.add(find_by_name(op.args[0]))


def _unpermit(state: DecisionState, op: Operation) -> None:
    state.permitted.discard(find_by_name(op.args[0]))


def _restrict(state: DecisionState, op: Operation) -> None:
    state.restricted.add(find_by_name(op.args[0]))


def _unrestrict(state: DecisionState, op: Operation) -> None:
    state.restricted.discard(find_by_name(op.args[0]))


def _name_project(state: DecisionState, op: Operation) -> None:
    state.project_name = op.args[0]


def _unname_project(state: DecisionState, op: Operation) -> None:
    state.project_name = None


HANDLERS: Dict[str, Callable[[DecisionState, Operation], None]] = {
    'add_package': _add_package,
    'remove_package': _remove_package,
    'license': _license,
    'unlicense': _unlicense,
    'approve': _approve,
    'unapprove': _unapprove,
    'homepage': _homepage,
    'ignore': _ignore,
    'heed': _heed,
    'ignore_group': _ignore_group,
    'heed_group': _heed_group,
    'permit': _permit,
    'unpermit': _unpermit,
    'restrict': _restrict,
    'unrestrict': _unrestrict,
    'name_project': _name_project,
    'unname_project': _unname_project,
}


def apply_operation(state: DecisionState, operation: Operation) -> DecisionState:
    """
    Fold one operation into the state.

    inherit_from needs I/O and is handled by Decisions, not here.

    Args:
        state: State to update in place
        operation: Any operation except inherit_from

    Returns:
        The same state, for chaining
    """
    handler = HANDLERS.get(operation.name)
    if handler is None:
        raise ValueError(f"No state handler for operation: {operation.name}")

    handler(state, operation)
    logger.debug(f"Applied {operation.name} {operation.args!r}")
    return state
