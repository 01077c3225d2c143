from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
import logging
import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError
from supabase import AsyncClient, PostgrestAPIError
from casedesk.core.errors import NotFound, StoreError, ValidationError
from casedesk.crud.mapping import to_columns

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)
Payload = Union[BaseModel, Dict[str, Any]]


def validate_payload(schema: Type[BaseModel], payload: Payload) -> BaseModel:
    """
    Coerce a payload into ``schema`` without touching the network.

    Only keys the caller actually supplied count as set, so the result can be
    dumped with ``exclude_unset=True`` for partial updates.
    """
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ValidationError(f"Missing or invalid fields: {fields}", detail=str(e)) from e


class SupabaseRepository(Generic[EntityT]):
    """
    Reads over one Supabase table.

    Subclasses name the table, its column map, the row mapper and the list
    ordering. Store failures surface as ``StoreError``. Writes come from
    ``CreatableRepository`` and ``UpdatableRepository``, so a table that only
    accepts inserts simply has no ``update``.
    """

    table: str
    columns: Dict[str, str]
    select_columns: str = "*"
    order_by: Optional[str] = None
    order_desc: bool = False

    def __init__(self, client: AsyncClient):
        self.client = client

    def from_row(self, row: Dict[str, Any]) -> EntityT:
        raise NotImplementedError

    def _to_entity(self, row: Dict[str, Any]) -> EntityT:
        try:
            return self.from_row(row)
        except (PydanticValidationError, ValueError) as e:
            logger.error(f"Unexpected row shape in {self.table}: {e}")
            raise StoreError(detail=f"Malformed {self.table} row") from e

    async def _execute(self, query: Any, action: str) -> Any:
        try:
            return await query.execute()
        except PostgrestAPIError as e:
            logger.error(f"Database error in {action} on {self.table}: {e.message}")
            raise StoreError(detail=e.message) from e
        except httpx.HTTPError as e:
            logger.error(f"Connection error in {action} on {self.table}: {e}")
            raise StoreError(detail=str(e)) from e

    def _select(self) -> Any:
        return self.client.table(self.table).select(self.select_columns)

    def _ordered(self, query: Any) -> Any:
        if self.order_by:
            query = query.order(self.order_by, desc=self.order_desc)
        return query

    async def ping(self) -> None:
        """Cheapest request that proves the table is reachable."""
        await self._execute(self.client.table(self.table).select("id").limit(1), "ping")

    async def list(self) -> List[EntityT]:
        response = await self._execute(self._ordered(self._select()), "list")
        return [self._to_entity(row) for row in response.data or []]

    async def get(self, entity_id: str) -> EntityT:
        response = await self._execute(self._select().eq("id", entity_id), "get")
        if not response.data:
            logger.warning(f"{self.table} row not found: {entity_id}")
            raise NotFound(detail=f"{self.table}/{entity_id}")
        return self._to_entity(response.data[0])


class CreatableRepository(SupabaseRepository[EntityT]):
    create_schema: Type[BaseModel]

    async def create(self, payload: Payload) -> EntityT:
        model = validate_payload(self.create_schema, payload)
        row = to_columns(model.model_dump(mode="json"), self.columns)

        response = await self._execute(self.client.table(self.table).insert(row), "create")
        if not response.data:
            raise StoreError(detail=f"Insert into {self.table} returned no row")

        entity = self._to_entity(response.data[0])
        logger.info(f"Created {self.table} row: {getattr(entity, 'id', '?')}")
        return entity


class UpdatableRepository(SupabaseRepository[EntityT]):
    update_schema: Type[BaseModel]

    async def update(self, entity_id: str, payload: Payload) -> EntityT:
        """Partial update; only the fields present in ``payload`` are sent."""
        model = validate_payload(self.update_schema, payload)
        fields = model.model_dump(mode="json", exclude_unset=True)
        if not fields:
            raise ValidationError("Nothing to update.")
        row = to_columns(fields, self.columns)

        response = await self._execute(
            self.client.table(self.table).update(row).eq("id", entity_id), "update"
        )
        if not response.data:
            logger.warning(f"{self.table} row not found for update: {entity_id}")
            raise NotFound(detail=f"{self.table}/{entity_id}")

        logger.info(f"Updated {self.table} row {entity_id}: {sorted(fields)}")
        return self._to_entity(response.data[0])
