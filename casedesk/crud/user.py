from typing import Any, Dict, List
import logging
from casedesk.core.errors import PolicyDenied
from casedesk.crud.base import UpdatableRepository
from casedesk.crud.mapping import PROFILE_COLUMNS, row_to_identity
from casedesk.schemas.user import Identity, IdentityUpdate, Role

logger = logging.getLogger(__name__)


def has_known_role(row: Dict[str, Any]) -> bool:
    try:
        Role(row.get("role"))
    except ValueError:
        return False
    return True


class ProfileRepository(UpdatableRepository[Identity]):
    """
    User profiles. Rows are created by the auth sign-up trigger from the
    metadata passed at registration, so there is no ``create`` here.

    A profile whose role CaseDesk does not know grants no access: it is left
    out of listings, and fetching it directly is denied.
    """
    table = "profiles"
    columns = PROFILE_COLUMNS
    order_by = "name"
    update_schema = IdentityUpdate

    def from_row(self, row):
        return row_to_identity(row)

    def _to_entity(self, row: Dict[str, Any]) -> Identity:
        if not has_known_role(row):
            logger.warning(f"Profile {row.get('id')} has unknown role {row.get('role')!r}")
            raise PolicyDenied(
                "Your account has no role with access to CaseDesk.",
                detail=f"profiles/{row.get('id')} role={row.get('role')!r}"
            )
        return super()._to_entity(row)

    async def list(self) -> List[Identity]:
        response = await self._execute(self._ordered(self._select()), "list")
        profiles = []
        for row in response.data or []:
            if not has_known_role(row):
                logger.warning(f"Skipping profile {row.get('id')} with unknown role {row.get('role')!r}")
                continue
            profiles.append(self._to_entity(row))
        return profiles
