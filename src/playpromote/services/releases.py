"""Release list mapping and rendering."""

import copy
from typing import Any, Dict, Iterable, List, Optional

from rich.table import Table

USER_FRACTION_FIELD = "userFraction"
UPDATE_PRIORITY_FIELD = "inAppUpdatePriority"


def apply_rollout(
    releases: Iterable[Dict[str, Any]],
    user_fraction: Optional[float] = None,
    update_priority: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Returns copies of ``releases`` with the supplied rollout values applied.

    A value of None leaves the corresponding field as it was on each release.
    The input list is never mutated.
    """
    promoted = []
    for release in releases:
        updated = copy.deepcopy(release)
        if user_fraction is not None:
            updated[USER_FRACTION_FIELD] = user_fraction
        if update_priority is not None:
            updated[UPDATE_PRIORITY_FIELD] = update_priority
        promoted.append(updated)
    return promoted


def build_release_table(track: str, releases: Iterable[Dict[str, Any]]) -> Table:
    table = Table(title=f"Releases for track '{track}'")
    table.add_column("Name")
    table.add_column("Version codes")
    table.add_column("Status")
    table.add_column("User fraction", justify="right")
    table.add_column("Update priority", justify="right")

    for release in releases:
        table.add_row(
            str(release.get("name", "")),
            ", ".join(str(code) for code in release.get("versionCodes", [])),
            str(release.get("status", "")),
            _display(release.get(USER_FRACTION_FIELD)),
            _display(release.get(UPDATE_PRIORITY_FIELD)),
        )
    return table


def _display(value: Any) -> str:
    return "-" if value is None else str(value)
