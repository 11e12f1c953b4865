import logging
from itertools import product
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from tenantboard.core.settings import Settings

from .models import Action, Grant, Resource, RoleGrants, parse_grant, parse_grant_string

logger = logging.getLogger(__name__)

ALL_GRANTS: FrozenSet[Grant] = frozenset(
    Grant(resource, action) for resource, action in product(Resource, Action)
)


class PermissionCatalog:
    """
    Resolves roles into effective grant sets.

    Role templates are passed in explicitly (normally from Settings) and are
    immutable once the catalog is built.
    """

    def __init__(self, templates: Mapping[str, Iterable[str]]):
        self._templates: Dict[str, FrozenSet[Grant]] = {}
        for name, grant_strings in templates.items():
            grants = set()
            for value in grant_strings:
                grant = parse_grant_string(value)
                if grant is None:
                    raise ValueError(
                        f"Invalid grant '{value}' in role template '{name}'"
                    )
                grants.add(grant)
            self._templates[name.lower()] = frozenset(grants)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PermissionCatalog":
        return cls(settings.ROLE_TEMPLATES)

    @property
    def template_names(self) -> List[str]:
        return sorted(self._templates)

    def template(self, name: str) -> FrozenSet[Grant]:
        """Grants of a named template, empty for unknown names."""
        return self._templates.get(name.lower(), frozenset())

    def resolve(self, role: Optional[RoleGrants]) -> FrozenSet[Grant]:
        """
        Flatten a role into its effective grant set.

        Args:
            role: Role loaded from the role store, or None if the user has none

        Returns:
            Frozen set of grants. Unknown resource/action strings are dropped.
        """
        if role is None:
            return frozenset()

        if role.is_system and role.name.lower() in self._templates:
            return self._templates[role.name.lower()]

        grants = set()
        for resource, action in role.permissions:
            grant = parse_grant(resource, action)
            if grant is None:
                logger.debug(
                    f"Ignoring unknown permission {resource}:{action} on role {role.role_id}"
                )
                continue
            grants.add(grant)
        return frozenset(grants)
