"""Shared domain models for playpromote."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PromotionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    EDIT_OPEN = "edit-open"
    SOURCE_READ = "source-read"
    DESTINATION_STAGED = "destination-staged"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True)
class PromotionConfig:
    """Inputs for one promotion run."""

    package_name: str
    service_account_json_raw: str = field(repr=False)
    from_track: str
    to_track: str
    user_fraction: Optional[float] = None
    update_priority: Optional[int] = None


@dataclass(frozen=True)
class EditTransaction:
    edit_id: str
    package_name: str
    expiry_time_seconds: Optional[str] = None


@dataclass(frozen=True)
class PromotionResult:
    package_name: str
    from_track: str
    to_track: str
    edit_id: str
    commit_id: Optional[str]
    releases: List[Dict[str, Any]]
    dry_run: bool = False
