from .account import AccountAdmin, TaxCodeAdmin
from .actions import deactivate_accounts, post_selected_bills
from .auditlog import AuditLogAdmin, PublishedEventAdmin
from .banking import BankAccountAdmin, BillPaymentAdmin
from .bill import BillAdmin, VendorAdmin
from .inlines import BillLineInline, BillPaymentInline, JournalLineInline
from .journal import JournalEntryAdmin
from .mixins import TenantAdminMixin
from .period import CompanyAdmin, PeriodAdmin
