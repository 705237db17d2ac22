"""
YAML codec for the decisions operation log.

A decisions file is a YAML sequence of records, one per operation:

    - - permit
      - MIT
    - - license
      - requests
      - Apache-2.0
      - versions:
        - 2.31.0
    - - inherit_from
      - url: https://example.com/decisions.yml

Records are decoded in full before anything is replayed, so a bad
record anywhere in the file rejects the whole file.
"""
from typing import Iterable, List, Optional

import yaml

from decisioning.errors import MalformedDecisionsError
from decisioning.operations import Operation


def loads(text: Optional[str]) -> List[Operation]:
    """
    Parse persisted decisions into operations.

    Args:
        text: YAML text. None or empty text yields no operations.

    Returns:
        Operations in file order

    Raises:
        MalformedDecisionsError: If the text is not a YAML list of records
        DeprecatedSyntaxError: If a record uses whitelist or blacklist
    """
    if not text:
        return []

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedDecisionsError(f"Unable to parse decisions: {e}") from e

    if loaded is None:
        return []
    if not isinstance(loaded, list):
        raise MalformedDecisionsError(
            f"Decisions must be a list of operations, got {type(loaded).__name__}"
        )

    return [Operation.from_record(record) for record in loaded]


def dumps(operations: Iterable[Operation]) -> str:
    """Serialize operations, in order, to YAML text."""
    records = [operation.to_record() for operation in operations]
    return yaml.safe_dump(records, default_flow_style=False, sort_keys=False, allow_unicode=True)
