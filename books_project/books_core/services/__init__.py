from .bills import create_bill, delete_bill, get_bill, post_bill, update_bill
from .chart import (create_account, create_bank_account, create_tax_code,
                    create_vendor, deactivate_account, posting_account,
                    seed_chart_of_accounts)
from .events import publish_envelope
from .locks import RecordLockStore, get_lock_store
from .payment import record_payment
from .posting import post_bill_journal, post_payment_journal
from .reporting import aging_report, trial_balance
