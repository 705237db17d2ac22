"""
License registry with canonical identities and alias resolution.

Every license name that enters the decisions layer passes through
find_by_name(), so "Expat" and "MIT" always compare equal. Names that
are not in the table are accepted as new canonical identities.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class License:
    """A license identified by its canonical name."""
    name: str
    pretty_name: str = field(default='', compare=False)
    url: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.pretty_name or self.name


# canonical name -> (pretty name, url, alternate spellings)
_KNOWN_LICENSES = {
    'MIT': (
        'MIT',
        'https://opensource.org/licenses/MIT',
        ['Expat', 'MIT License', 'The MIT License', 'MIT license', 'mit'],
    ),
    'Apache-2.0': (
        'Apache 2.0',
        'https://www.apache.org/licenses/LICENSE-2.0',
        ['Apache 2.0', 'Apache2', 'Apache-2', 'Apache License 2.0',
         'Apache License, Version 2.0', 'Apache Software License', 'ASL 2.0'],
    ),
    'BSD-2-Clause': (
        'Simplified BSD',
        'https://opensource.org/licenses/BSD-2-Clause',
        ['Simplified BSD', 'FreeBSD', '2-clause BSD', 'BSD-2'],
    ),
    'BSD-3-Clause': (
        'New BSD',
        'https://opensource.org/licenses/BSD-3-Clause',
        ['New BSD', 'Modified BSD', '3-clause BSD', 'BSD-3', 'BSD 3-Clause'],
    ),
    '0BSD': (
        'BSD Zero Clause',
        'https://opensource.org/licenses/0BSD',
        ['BSD Zero Clause License', 'Zero-Clause BSD'],
    ),
    'ISC': (
        'ISC',
        'https://opensource.org/licenses/ISC',
        ['ISC License', 'ISCL'],
    ),
    'GPL-2.0': (
        'GPLv2',
        'https://www.gnu.org/licenses/old-licenses/gpl-2.0.txt',
        ['GPLv2', 'GPL V2', 'gpl-v2', 'GPL-2.0-only',
         'GNU GENERAL PUBLIC LICENSE Version 2'],
    ),
    'GPL-3.0': (
        'GPLv3',
        'https://www.gnu.org/licenses/gpl-3.0.txt',
        ['GPLv3', 'GPL V3', 'gpl-v3', 'GPL-3.0-only',
         'GNU GENERAL PUBLIC LICENSE Version 3'],
    ),
    'LGPL-2.1': (
        'LGPLv2.1',
        'https://www.gnu.org/licenses/old-licenses/lgpl-2.1.txt',
        ['LGPLv2.1', 'LGPL-2.1-only', 'LGPL 2.1'],
    ),
    'LGPL-3.0': (
        'LGPLv3',
        'https://www.gnu.org/licenses/lgpl-3.0.txt',
        ['LGPLv3', 'LGPL-3.0-only', 'LGPL 3.0'],
    ),
    'MPL-2.0': (
        'Mozilla Public License 2.0',
        'https://www.mozilla.org/media/MPL/2.0/index.txt',
        ['Mozilla Public License 2.0', 'MPL 2.0', 'MPL2'],
    ),
    'EPL-1.0': (
        'Eclipse Public License 1.0',
        'https://www.eclipse.org/legal/epl-v10.html',
        ['Eclipse Public License 1.0', 'EPL 1.0'],
    ),
    'Python-2.0': (
        'Python Software Foundation License',
        'https://www.python.org/download/releases/2.0/license/',
        ['PSF', 'PSFL', 'Python Software Foundation License'],
    ),
    'Ruby': (
        'ruby',
        'https://www.ruby-lang.org/en/about/license.txt',
        ['ruby', 'Ruby License'],
    ),
    'CC0-1.0': (
        'CC0 1.0 Universal',
        'https://creativecommons.org/publicdomain/zero/1.0/',
        ['CC0', 'CC0 1.0 Universal'],
    ),
    'Unlicense': (
        'The Unlicense',
        'https://unlicense.org/',
        ['The Unlicense', 'unlicense'],
    ),
    'WTFPL': (
        'WTFPL',
        'http://www.wtfpl.net/',
        ['Do What The F*ck You Want To Public License'],
    ),
}


def _build_index() -> Dict[str, License]:
    index = {}
    for canonical, (pretty_name, url, aliases) in _KNOWN_LICENSES.items():
        license_ = License(name=canonical, pretty_name=pretty_name, url=url)
        index[canonical] = license_
        for alias in aliases:
            index[alias] = license_
    return index


_REGISTRY: Dict[str, License] = _build_index()


def find_by_name(raw: str) -> License:
    """
    Resolve a license name to its canonical License.

    Lookup is case-sensitive and exact. Unknown names become their own
    canonical identity.

    Args:
        raw: License name as written by a user or a decisions file

    Returns:
        License instance (shared for known licenses)
    """
    known = _REGISTRY.get(raw)
    if known is not None:
        return known
    return License(name=raw, pretty_name=raw)


def known_licenses() -> List[License]:
    """Canonical licenses in the registry, in table order."""
    return [_REGISTRY[name] for name in _KNOWN_LICENSES]
