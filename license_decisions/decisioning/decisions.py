"""
Decisions aggregate: the recorded license decisions for one project.

State is always a fold over an ordered log of operations. Every mutator
records an Operation, applies it through the reducer and appends it to
the local log, then returns self so calls can be chained:

    decisions = Decisions().permit('MIT').license('requests', 'Apache-2.0')

Operations pulled in through inherit_from are applied to the state but
never logged; the log only gets a single inherit_from record pointing at
the source, so persist() writes back what the user authored and nothing
more.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union
import logging

from ingestion import sources
from ingestion.http_client import DEFAULT_TIMEOUT_SECONDS, HttpClient
from licensing import License, find_by_name
from storage import codec
from .errors import InheritanceCycleError
from .models import Approval, DecisionState, Package
from .operations import INHERIT_FROM, Operation, apply_operation


logger = logging.getLogger(__name__)

LicenseRef = Union[str, License]


class Decisions:
    """
    Mutable, event-sourced set of license decisions.

    Queries read the folded DecisionState; persistence serializes the
    local operation log.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, http_client: Optional[HttpClient] = None):
        """
        Initialize an empty decisions aggregate.

        Args:
            config: Inheritance settings (the `inheritance` config section)
            http_client: Client for remote sources. Built from config if None.
        """
        config = config or {}
        self.state = DecisionState()
        self.operations: List[Operation] = []
        self.inherited_decisions: List[Any] = []
        self.http_client = http_client or HttpClient(
            timeout_seconds=config.get('timeout_seconds', DEFAULT_TIMEOUT_SECONDS)
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def restore(
        cls,
        persisted: Optional[str],
        config: Optional[Dict[str, Any]] = None,
        http_client: Optional[HttpClient] = None,
    ) -> 'Decisions':
        """
        Rebuild decisions by replaying a persisted operation log.

        Args:
            persisted: Output of persist(). None or empty text gives empty decisions.
            config: Inheritance settings
            http_client: Client for remote sources referenced by the log

        Raises:
            MalformedDecisionsError: If the log cannot be parsed
            DeprecatedSyntaxError: If the log uses whitelist/blacklist
        """
        decisions = cls(config, http_client)
        for operation in codec.loads(persisted):
            decisions._execute(operation)
        return decisions

    def persist(self) -> str:
        """Serialize the locally authored operations to YAML."""
        return codec.dumps(self.operations)

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    @property
    def packages(self) -> List[Package]:
        return [
            Package(decision.name, version)
            for decision in self.state.packages.values()
            for version in decision.versions
        ]

    def add_package(self, name: str, version: Optional[str] = None) -> 'Decisions':
        args = (name,) if version is None else (name, version)
        return self._execute(Operation('add_package', args))

    def remove_package(self, name: str) -> 'Decisions':
        return self._execute(Operation('remove_package', (name,)))

    # ------------------------------------------------------------------
    # Licenses
    # ------------------------------------------------------------------

    def licenses_of(self, name: str, version: Optional[str] = None) -> Set[License]:
        """
        Licenses recorded for a package.

        A versioned query ignores all-versions licenses once the package
        has any version-specific license. The versionless query always
        returns the all-versions licenses.
        """
        decision = self.state.find_package(name)
        if decision is None:
            return set()
        return decision.licenses_for(version)

    def license(self, name: str, license_name: str, versions: Optional[Sequence[str]] = None) -> 'Decisions':
        return self._execute(Operation('license', (name, license_name), _versions_option(versions)))

    def unlicense(
        self,
        name: str,
        license_name: Optional[str] = None,
        versions: Optional[Sequence[str]] = None,
    ) -> 'Decisions':
        """
        Remove licenses from a package.

        With a license and no versions the license is removed from every
        scope. Without a license, every license in the targeted scopes is
        cleared (all scopes when no versions are given).
        """
        args = (name,) if license_name is None else (name, license_name)
        return self._execute(Operation('unlicense', args, _versions_option(versions)))

    # ------------------------------------------------------------------
    # Approvals
    # ------------------------------------------------------------------

    def approve(
        self,
        name: str,
        who: Optional[str] = None,
        why: Optional[str] = None,
        when: Optional[datetime] = None,
        versions: Optional[Sequence[str]] = None,
    ) -> 'Decisions':
        """
        Record a sign-off for a package.

        Versions accumulate across approvals until unapprove() clears them.
        `when` defaults to now (UTC) and is logged, so restores keep it.
        """
        options: Dict[str, Any] = {}
        if who is not None:
            options['who'] = who
        if why is not None:
            options['why'] = why
        options['when'] = when or datetime.now(timezone.utc)
        options.update(_versions_option(versions))
        return self._execute(Operation('approve', (name,), options))

    def unapprove(self, name: str) -> 'Decisions':
        return self._execute(Operation('unapprove', (name,)))

    def approval_of(self, name: str, version: Optional[str] = None) -> Optional[Approval]:
        decision = self.state.find_package(name)
        return decision.approval if decision else None

    def is_approved(self, name: str, version: Optional[str] = None) -> bool:
        approval = self.approval_of(name)
        return approval is not None and approval.covers(version)

    # ------------------------------------------------------------------
    # Homepages
    # ------------------------------------------------------------------

    def homepage(self, name: str, url: str) -> 'Decisions':
        return self._execute(Operation('homepage', (name, url)))

    def homepage_of(self, name: str) -> Optional[str]:
        decision = self.state.find_package(name)
        return decision.homepage if decision else None

    # ------------------------------------------------------------------
    # Ignored packages and groups
    # ------------------------------------------------------------------

    def ignore(self, name: str) -> 'Decisions':
        return self._execute(Operation('ignore', (name,)))

    def heed(self, name: str) -> 'Decisions':
        return self._execute(Operation('heed', (name,)))

    def is_ignored(self, name: str) -> bool:
        decision = self.state.find_package(name)
        return bool(decision and decision.ignored)

    @property
    def ignored(self) -> Set[str]:
        return {name for name, decision in self.state.packages.items() if decision.ignored}

    def ignore_group(self, group: str) -> 'Decisions':
        return self._execute(Operation('ignore_group', (group,)))

    def heed_group(self, group: str) -> 'Decisions':
        return self._execute(Operation('heed_group', (group,)))

    def is_ignored_group(self, group: str) -> bool:
        return group in self.state.ignored_groups

    @property
    def ignored_groups(self) -> Set[str]:
        return set(self.state.ignored_groups)

    # ------------------------------------------------------------------
    # Permitted and restricted licenses
    # ------------------------------------------------------------------

    def permit(self, license_name: str) -> 'Decisions':
        return self._execute(Operation('permit', (license_name,)))

    def unpermit(self, license_name: str) -> 'Decisions':
        return self._execute(Operation('unpermit', (license_name,)))

    def restrict(self, license_name: str) -> 'Decisions':
        return self._execute(Operation('restrict', (license_name,)))

    def unrestrict(self, license_name: str) -> 'Decisions':
        return self._execute(Operation('unrestrict', (license_name,)))

    @property
    def permitted(self) -> Set[License]:
        return set(self.state.permitted)

    @property
    def restricted(self) -> Set[License]:
        return set(self.state.restricted)

    def is_permitted(self, license_: LicenseRef) -> bool:
        return _resolve(license_) in self.state.permitted

    def is_restricted(self, license_: LicenseRef) -> bool:
        return _resolve(license_) in self.state.restricted

    # ------------------------------------------------------------------
    # Project
    # ------------------------------------------------------------------

    @property
    def project_name(self) -> Optional[str]:
        return self.state.project_name

    def name_project(self, name: str) -> 'Decisions':
        return self._execute(Operation('name_project', (name,)))

    def unname_project(self) -> 'Decisions':
        return self._execute(Operation('unname_project'))

    # ------------------------------------------------------------------
    # Inheritance
    # ------------------------------------------------------------------

    def inherit_from(self, source_spec: Any) -> 'Decisions':
        """
        Apply the decisions of another file without persisting them.

        The source is fetched and replayed immediately, including any
        sources it inherits from in turn. Only one inherit_from record,
        carrying source_spec as given, is added to the local log.

        Raises:
            FetchError: If any source in the chain cannot be loaded
            UnresolvedSecretError: If an authorization references an unset variable
            DeprecatedSyntaxError: If any source uses whitelist/blacklist
            InheritanceCycleError: If a source inherits from itself
        """
        return self._execute(Operation(INHERIT_FROM, (source_spec,)))

    def remove_inheritance(self, source_spec: Any) -> 'Decisions':
        """
        Stop inheriting from a source.

        Rules already applied from the source stay in effect until the
        decisions are restored again.
        """
        if source_spec not in self.inherited_decisions:
            logger.warning(f"Not inheriting from {source_spec!r}; nothing to remove")
            return self

        self.inherited_decisions.remove(source_spec)
        self.operations = [
            op for op in self.operations
            if not (op.name == INHERIT_FROM and op.args[0] == source_spec)
        ]
        logger.info(f"Removed inheritance from {source_spec!r}")
        return self

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    def _execute(self, operation: Operation) -> 'Decisions':
        """Apply a locally authored operation and log it."""
        self._replay(operation, chain=())
        if operation.name == INHERIT_FROM:
            self.inherited_decisions.append(operation.args[0])
        self.operations.append(operation)
        return self

    def _replay(self, operation: Operation, chain: Tuple['sources.InheritanceSource', ...]) -> None:
        """
        Apply an operation to the state without logging it.

        `chain` lists the inherited sources being expanded, outermost
        first. It is empty for locally authored operations.
        """
        if operation.name == INHERIT_FROM:
            self._inherit(operation.args[0], chain)
        else:
            apply_operation(self.state, operation)

    def _inherit(self, source_spec: Any, chain: Tuple['sources.InheritanceSource', ...]) -> None:
        source = sources.source_from_spec(source_spec, self.http_client)
        if any(parent.key == source.key for parent in chain):
            raise InheritanceCycleError([*chain, source])

        logger.info(f"Inheriting decisions from {source}")
        operations = codec.loads(source.read())

        nested = (*chain, source)
        for operation in operations:
            self._replay(operation, nested)
        logger.debug(f"Applied {len(operations)} inherited operations from {source}")


def _resolve(license_: LicenseRef) -> License:
    return license_ if isinstance(license_, License) else find_by_name(license_)


def _versions_option(versions: Optional[Sequence[str]]) -> Dict[str, Any]:
    if isinstance(versions, str):
        versions = [versions]
    return {'versions': list(versions)} if versions else {}
