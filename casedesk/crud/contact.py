from casedesk.crud.base import CreatableRepository, UpdatableRepository
from casedesk.crud.mapping import CONTACT_COLUMNS, row_to_contact
from casedesk.schemas.contact import Contact, ContactCreate, ContactUpdate

class ContactRepository(CreatableRepository[Contact], UpdatableRepository[Contact]):
    table = "contacts"
    columns = CONTACT_COLUMNS
    order_by = "name"
    create_schema = ContactCreate
    update_schema = ContactUpdate

    def from_row(self, row):
        return row_to_contact(row)
