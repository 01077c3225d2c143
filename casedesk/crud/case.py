from casedesk.crud.base import CreatableRepository, UpdatableRepository
from casedesk.crud.mapping import CASE_COLUMNS, row_to_case
from casedesk.schemas.case import Case, CaseCreate, CaseUpdate

class CaseRepository(CreatableRepository[Case], UpdatableRepository[Case]):
    """
    Cases, newest first.
    """
    table = "cases"
    columns = CASE_COLUMNS
    order_by = "created_at"
    order_desc = True
    create_schema = CaseCreate
    update_schema = CaseUpdate

    def from_row(self, row):
        return row_to_case(row)
