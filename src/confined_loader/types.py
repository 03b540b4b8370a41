"""Shared enumeration of load restrictions."""

from __future__ import annotations

from enum import Enum


class LoadRestrictions(str, Enum):
    """Restrictions on what a configuration file may refer to.

    ``UNKNOWN`` marks a missing setting and is never a valid operating
    choice; it is rejected where a load operation is configured.
    """

    UNKNOWN = "LoadRestrictionsUnknown"
    # Referenced files must be in or under the directory holding the
    # configuration file, after following symbolic links.
    ROOT_ONLY = "LoadRestrictionsRootOnly"
    # Referenced files and links must be located in or under the root,
    # but links located there may point anywhere.
    DOMINATED_SHALLOWLY = "LoadRestrictionsDominatedShallowly"
    # Absolute or relative references outside the root are allowed.
    NONE = "LoadRestrictionsNone"

    def __str__(self) -> str:
        return self.value

    @property
    def short_name(self) -> str:
        """Display name without the ``LoadRestrictions`` prefix."""
        return self.value[len("LoadRestrictions"):]

    @classmethod
    def parse(cls, text: str) -> LoadRestrictions:
        """Parse a setting value into a member.

        Accepts the display name (``LoadRestrictionsRootOnly``), the short
        name (``RootOnly``) and snake or kebab forms (``root_only``,
        ``root-only``), case-insensitively.

        Raises:
            ValueError: If *text* names no member.
        """
        key = text.strip().replace("-", "").replace("_", "").lower()
        for member in cls:
            if key in (member.value.lower(), member.short_name.lower()):
                return member
        allowed = ", ".join(m.short_name for m in cls)
        raise ValueError(f"Invalid load restrictions '{text}'. Allowed: {allowed}")

    @classmethod
    def coerce(cls, value: LoadRestrictions | str) -> LoadRestrictions:
        """Return *value* as a member, parsing strings with :meth:`parse`."""
        if isinstance(value, cls):
            return value
        return cls.parse(str(value))
