from typing import List, Optional
from casedesk.crud.base import CreatableRepository
from casedesk.crud.mapping import DOCUMENT_COLUMNS, row_to_document
from casedesk.schemas.document import CaseDocument, CaseDocumentCreate

class DocumentRepository(CreatableRepository[CaseDocument]):
    """
    Metadata for files attached to cases. The files themselves live in
    Supabase Storage; rows are never updated.
    """
    table = "case_documents"
    columns = DOCUMENT_COLUMNS
    order_by = "created_at"
    order_desc = True
    create_schema = CaseDocumentCreate

    def from_row(self, row):
        return row_to_document(row)

    async def list(self, case_id: Optional[str] = None) -> List[CaseDocument]:
        query = self._select()
        if case_id:
            query = query.eq("case_id", case_id)
        response = await self._execute(self._ordered(query), "list")
        return [self._to_entity(row) for row in response.data or []]
