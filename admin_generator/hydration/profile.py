"""
Pydantic models for hydration configuration.

A hydration configuration has two parts:

    {
        "profiles": {
            "list": HydrationProfile.create(False).use_groups(["form"]),
            "main": ["form", "author"],           # shorthand, grouping enabled
        },
        "groups": {
            "form": ["id", "title"],              # output key = path
            "author": {"name": "author.name"},    # output key -> path
            "tags": lambda article, context: [t.label for t in article.tags],
        },
    }
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from admin_generator.exceptions import HydrationError


GroupHydrator = Union[Callable[[Any, Any], Any], Mapping, List[str]]


class HydrationProfile(BaseModel):
    """
    Ordered set of hydration groups used for one client view.

    Attributes:
        groups: Group names, applied in order.
        is_grouping_needed: When True the result is keyed by group name,
            otherwise group results are merged into a single mapping.
    """
    model_config = ConfigDict(frozen=True)

    groups: List[str] = Field(default_factory=list)
    is_grouping_needed: bool = True

    @classmethod
    def create(cls, is_grouping_needed: bool = True) -> "HydrationProfile":
        return cls(is_grouping_needed=is_grouping_needed)

    def use_groups(self, groups: List[str]) -> "HydrationProfile":
        """Return a copy of this profile using the given groups."""
        return self.model_copy(update={"groups": list(groups)})


class HydrationConfig(BaseModel):
    """
    Root hydration configuration: named profiles and named groups.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    profiles: Dict[str, HydrationProfile] = Field(default_factory=dict)
    groups: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("profiles", mode="before")
    @classmethod
    def expand_profile_shorthand(cls, v: Any) -> Any:
        """Accept a plain list of group names as a grouping profile."""
        if not isinstance(v, Mapping):
            return v
        expanded = {}
        for name, profile in v.items():
            if isinstance(profile, (list, tuple)):
                profile = HydrationProfile(groups=list(profile))
            expanded[name] = profile
        return expanded

    @field_validator("groups")
    @classmethod
    def validate_group_definitions(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        for name, hydrator in v.items():
            if not (callable(hydrator) or isinstance(hydrator, (Mapping, list, tuple))):
                raise ValueError(
                    f"Group '{name}' must be a callable, a mapping of output keys to "
                    f"property paths or a list of property paths, got {type(hydrator).__name__}"
                )
        return v

    def get_profile(self, name: str) -> HydrationProfile:
        """Get profile by name or raise error if not found."""
        profile = self.profiles.get(name)
        if profile is None:
            raise HydrationError(
                f"Hydration profile '{name}' is not defined. "
                f"Available profiles: {list(self.profiles.keys())}"
            )
        return profile

    def get_group(self, name: str) -> Any:
        """Get group hydrator by name or raise error if not found."""
        if name not in self.groups:
            raise HydrationError(
                f"Hydration group '{name}' is not defined. "
                f"Available groups: {list(self.groups.keys())}"
            )
        return self.groups[name]

    @classmethod
    def coerce(cls, value: Union["HydrationConfig", Mapping, None]) -> "HydrationConfig":
        """Accept an existing config or a raw mapping."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value or {}))
