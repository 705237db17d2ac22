"""
State model for recorded license decisions.

DecisionState is the flattened view produced by folding the operation
log; it holds no history of its own.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Set

from licensing import License


@dataclass(frozen=True)
class Package:
    """A manually recorded package."""
    name: str
    version: Optional[str] = None


@dataclass
class Approval:
    """Sign-off for a package. An empty version list covers every version."""
    who: Optional[str] = None
    why: Optional[str] = None
    when: Optional[datetime] = None
    versions: List[str] = field(default_factory=list)

    def covers(self, version: Optional[str]) -> bool:
        return version is None or not self.versions or version in self.versions


@dataclass
class PackageDecision:
    """Everything decided about a single package name."""
    name: str
    versions: List[Optional[str]] = field(default_factory=list)
    all_versions: Set[License] = field(default_factory=set)
    by_version: Dict[str, Set[License]] = field(default_factory=dict)
    approval: Optional[Approval] = None
    homepage: Optional[str] = None
    ignored: bool = False

    def licenses_for(self, version: Optional[str] = None) -> Set[License]:
        """
        Licenses visible to a query.

        A versioned query only sees version-specific entries once the
        package has any of them, for any version.
        """
        if version is None or not self.by_version:
            return set(self.all_versions)
        return set(self.by_version.get(version, set()))

    def add_license(self, license_: License, versions: List[str]) -> None:
        if not versions:
            self.all_versions.add(license_)
            return
        for version in versions:
            self.by_version.setdefault(version, set()).add(license_)

    def remove_license(self, license_: Optional[License], versions: List[str]) -> None:
        if versions:
            scopes = [self.by_version[v] for v in versions if v in self.by_version]
        else:
            scopes = [self.all_versions, *self.by_version.values()]

        for scope in scopes:
            if license_ is None:
                scope.clear()
            else:
                scope.discard(license_)

        self.by_version = {v: s for v, s in self.by_version.items() if s}


@dataclass
class DecisionState:
    """Merged view of all package, group, license and project decisions."""
    packages: Dict[str, PackageDecision] = field(default_factory=dict)
    ignored_groups: Set[str] = field(default_factory=set)
    permitted: Set[License] = field(default_factory=set)
    restricted: Set[License] = field(default_factory=set)
    project_name: Optional[str] = None

    def package(self, name: str) -> PackageDecision:
        """Get or create the decision record for a package name."""
        if name not in self.packages:
            self.packages[name] = PackageDecision(name=name)
        return self.packages[name]

    def find_package(self, name: str) -> Optional[PackageDecision]:
        return self.packages.get(name)
