"""Role-specific context injected into grounded chat turns."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from storage.school_directory import SchoolDirectory, Profile

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_PREFIX = "You are an assistant with access to the following info: "


@dataclass
class UserContext:
    profile: Optional[Profile]
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def grounded(self) -> bool:
        """False when the caller has no profile row (ungrounded chat)."""
        return self.profile is not None

    def system_message(self) -> Dict[str, str]:
        return {
            "role": "system",
            "content": SYSTEM_PROMPT_PREFIX + json.dumps(self.data, default=str),
        }


def resolve_user_context(directory: SchoolDirectory, user_id: str) -> UserContext:
    """
    Look up the caller's profile and the records their role may see:
    parents get their child and the child's teachers, teachers get their
    class and its students, everyone else an empty context.
    """
    profile = directory.get_profile(user_id)
    if profile is None:
        logger.info(f"No profile for user {user_id}; answering ungrounded")
        return UserContext(profile=None)

    if profile.role == "parent":
        data = directory.get_parent_context(user_id)
    elif profile.role == "teacher":
        data = directory.get_teacher_context(user_id)
    else:
        data = {}

    logger.info(f"Resolved {profile.role} context for user {user_id}: keys={sorted(data)}")
    return UserContext(profile=profile, data=data)
