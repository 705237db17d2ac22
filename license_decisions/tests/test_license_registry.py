"""
Tests for the license registry.
"""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from licensing import License, find_by_name, known_licenses


class TestFindByName:
    """Test alias resolution."""

    def test_canonical_name_resolves_to_itself(self):
        """Canonical name should resolve to its own entry."""
        assert find_by_name('MIT').name == 'MIT'

    def test_alias_resolves_to_canonical_license(self):
        """Alias should resolve to the canonical license."""
        assert find_by_name('Expat') == find_by_name('MIT')
        assert find_by_name('Expat').name == 'MIT'

    def test_known_licenses_are_shared_instances(self):
        """Known license lookups should return the same instance."""
        assert find_by_name('Apache 2.0') is find_by_name('Apache-2.0')

    def test_lookup_is_case_sensitive(self):
        """Lookup should not fold case."""
        assert find_by_name('EXPAT') != find_by_name('MIT')

    def test_unknown_names_become_new_identities(self):
        """Unknown name should become a license of its own, equal only to itself."""
        license_ = find_by_name('Some Custom License')

        assert license_.name == 'Some Custom License'
        assert license_ == find_by_name('Some Custom License')
        assert license_ != find_by_name('MIT')

    @pytest.mark.parametrize('alias', ['GPLv2', 'GPL V2', 'GPL-2.0-only'])
    def test_gpl2_aliases(self, alias):
        """GPL-2.0 spellings should resolve to one license."""
        assert find_by_name(alias) == find_by_name('GPL-2.0')


class TestLicense:
    """Test License value semantics."""

    def test_equality_ignores_display_fields(self):
        """Licenses with the same name should be equal whatever their display fields."""
        assert License('MIT', pretty_name='x') == License('MIT', pretty_name='y', url='z')

    def test_usable_in_sets(self):
        """Aliases of one license should collapse to one set member."""
        licenses = {find_by_name('MIT'), find_by_name('Expat'), License('MIT')}
        assert len(licenses) == 1

    def test_str_uses_pretty_name(self):
        """str() should show the pretty name."""
        assert str(find_by_name('BSD-3-Clause')) == 'New BSD'

    def test_licenses_are_immutable(self):
        """License fields should not be assignable."""
        with pytest.raises(AttributeError):
            find_by_name('MIT').name = 'GPL'

    def test_known_licenses_lists_canonical_entries(self):
        """known_licenses should list each canonical license once, without aliases."""
        names = [license_.name for license_ in known_licenses()]

        assert 'MIT' in names
        assert 'Expat' not in names
        assert len(names) == len(set(names))
