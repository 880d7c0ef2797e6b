"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum

TARGET_COUNT_MOTIONS = frozenset({"booth_giveaways"})
BOOST_REGISTRATION_MOTION = "boost_registration"


class CampaignMode(StrEnum):
    """Budgeting mode of a campaign at the recipient step."""

    STANDARD = "standard"
    TARGET_COUNT = "target_count"

    @classmethod
    def from_motion(cls, motion: str | None) -> CampaignMode:
        if motion in TARGET_COUNT_MOTIONS:
            return cls.TARGET_COUNT
        return cls.STANDARD


class RemotePrecedence(StrEnum):
    """When committed remote recipients replace a cached local selection."""

    ALWAYS = "always"
    IF_NEWER = "if_newer"


class NoticeScope(StrEnum):
    """Control a user-facing notice is attached to."""

    LIST_SELECTOR = "list_selector"
    RECIPIENT_TABLE = "recipient_table"
    SUBMIT = "submit"
