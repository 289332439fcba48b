import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction

from ..exceptions import ConfigurationError, NotFound, ValidationFailed
from ..models import Account, BankAccount, TaxCode, Vendor
from .audit_helper import log_action

logger = logging.getLogger(__name__)

# (code, name, type, parent code, is_header, is_control)
DEFAULT_CHART = [
    ("1000", "Current Assets", "asset", None, True, False),
    ("1100", "Cash and Bank", "asset", "1000", True, False),
    ("1101", "Cash in Hand", "asset", "1100", False, False),
    ("1111", "Primary Bank Account", "asset", "1100", False, False),
    ("1400", "Prepaid Expenses", "asset", "1000", False, False),
    ("1500", "Input GST", "asset", "1000", True, False),
    ("1501", "Input CGST", "asset", "1500", False, False),
    ("1502", "Input SGST", "asset", "1500", False, False),
    ("1503", "Input IGST", "asset", "1500", False, False),
    ("1504", "Input Cess", "asset", "1500", False, False),
    ("3000", "Current Liabilities", "liability", None, True, False),
    ("3100", "Accounts Payable", "liability", "3000", True, False),
    ("3101", "Trade Payables", "liability", "3100", False, True),
    ("3300", "TDS Payable", "liability", "3000", False, False),
    ("5000", "Owner's Equity", "equity", None, True, False),
    ("5100", "Capital Account", "equity", "5000", False, False),
    ("8000", "Cost of Goods Sold", "expense", None, True, False),
    ("8100", "Purchases", "expense", "8000", False, False),
    ("9000", "Operating Expenses", "expense", None, True, False),
    ("9200", "Rent Expense", "expense", "9000", False, False),
    ("9300", "Utilities", "expense", "9000", False, False),
    ("9400", "Professional Fees", "expense", "9000", False, False),
    ("9500", "Office Supplies", "expense", "9000", False, False),
]

DEFAULT_GST_RATES = ["0", "5", "12", "18", "28"]


@transaction.atomic
def seed_chart_of_accounts(company):
    """Create the default chart and GST codes; safe to run repeatedly."""
    created = 0
    by_code = {}
    for code, name, ac_type, parent_code, is_header, is_control in DEFAULT_CHART:
        account, was_created = Account.objects.get_or_create(
            company=company,
            code=code,
            defaults={
                "name": name,
                "ac_type": ac_type,
                "parent": by_code.get(parent_code),
                "is_header": is_header,
                "is_control_account": is_control,
            },
        )
        by_code[code] = account
        created += int(was_created)

    for rate in DEFAULT_GST_RATES:
        _, was_created = TaxCode.objects.get_or_create(
            company=company,
            code=f"GST{rate}",
            defaults={"name": f"GST {rate}%", "tax_type": "gst", "rate": Decimal(rate)},
        )
        created += int(was_created)

    logger.info("Seeded chart of accounts for %s (%d new rows)", company.slug, created)
    return created


# ----------------------------
# Posting account resolution
# ----------------------------
MISSING_ACCOUNT_CODES = {
    "accounts_payable": "NO_AP_ACCOUNT",
    "input_cgst": "NO_TAX_ACCOUNT",
    "input_sgst": "NO_TAX_ACCOUNT",
    "input_igst": "NO_TAX_ACCOUNT",
    "input_cess": "NO_TAX_ACCOUNT",
    "tds_payable": "NO_TDS_ACCOUNT",
}


def posting_account(company, role):
    """Return the tenant's Account configured for a posting role.

    Roles and their account codes come from settings.BOOKS_POSTING_ACCOUNTS.
    """
    code = settings.BOOKS_POSTING_ACCOUNTS.get(role)
    account = None
    if code:
        account = Account.objects.for_company(company).filter(code=code).first()
    if account is None:
        raise ConfigurationError(
            f"No '{role}' account (code {code}) configured for {company.slug}",
            code=MISSING_ACCOUNT_CODES.get(role, "CONFIGURATION_ERROR"),
        )
    if not account.accepts_postings():
        raise ConfigurationError(
            f"Account {account.code} for '{role}' is inactive or a header account",
            code="INACTIVE_ACCOUNT",
        )
    return account


# ----------------------------
# Reference data maintenance
# ----------------------------
def create_account(company, data, actor=""):
    if Account.objects.for_company(company).filter(code=data["code"]).exists():
        raise ValidationFailed("Account code already exists", code="DUPLICATE_CODE")
    with transaction.atomic():
        account = Account.objects.create(company=company, **data)
        log_action(action="create", instance=account, actor=actor,
                   changes={"code": account.code, "ac_type": account.ac_type})
    return account


def deactivate_account(company, account_id, actor=""):
    account = Account.objects.for_company(company).filter(pk=account_id).first()
    if account is None:
        raise NotFound("Account not found")
    with transaction.atomic():
        account.deactivate()
        log_action(action="deactivate", instance=account, actor=actor)
    return account


def create_tax_code(company, data, actor=""):
    if TaxCode.objects.for_company(company).filter(code=data["code"]).exists():
        raise ValidationFailed("Tax code already exists", code="DUPLICATE_CODE")
    with transaction.atomic():
        tax_code = TaxCode.objects.create(company=company, **data)
        log_action(action="create", instance=tax_code, actor=actor,
                   changes={"code": tax_code.code, "rate": str(tax_code.rate)})
    return tax_code


def create_vendor(company, data, actor=""):
    if Vendor.objects.for_company(company).filter(code=data["code"]).exists():
        raise ValidationFailed("Vendor code already exists", code="DUPLICATE_CODE")
    with transaction.atomic():
        vendor = Vendor.objects.create(company=company, **data)
        log_action(action="create", instance=vendor, actor=actor,
                   changes={"code": vendor.code, "name": vendor.name})
    return vendor


def create_bank_account(company, data, actor=""):
    with transaction.atomic():
        bank_account = BankAccount.objects.create(company=company, **data)
        log_action(action="create", instance=bank_account, actor=actor,
                   changes={"ledger_account": bank_account.ledger_account.code})
    return bank_account
