from .account import Account
from .auditlog import AuditLog
from .banking import BankAccount
from .bill import Bill, BillLine
from .company import Company
from .event import PublishedEvent
from .journal import JournalEntry, JournalLine
from .payment import BillPayment
from .period import Period
from .tax import TaxCode
from .vendor import Vendor
