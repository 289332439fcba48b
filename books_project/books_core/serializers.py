"""Plain-dict renderings of models for the JSON API.

Decimals and dates are left as Python objects; the response encoder
(DjangoJSONEncoder) turns them into strings.
"""
from decimal import Decimal

ZERO = Decimal("0.00")


def account_dict(account):
    return {
        "id": account.pk,
        "code": account.code,
        "name": account.name,
        "ac_type": account.ac_type,
        "normal_balance": account.normal_balance,
        "parent_id": account.parent_id,
        "is_header": account.is_header,
        "is_active": account.is_active,
        "is_control_account": account.is_control_account,
    }


def tax_code_dict(tax_code):
    return {
        "id": tax_code.pk,
        "code": tax_code.code,
        "name": tax_code.name,
        "tax_type": tax_code.tax_type,
        "rate": tax_code.rate,
        "cgst_rate": tax_code.cgst_rate,
        "sgst_rate": tax_code.sgst_rate,
        "igst_rate": tax_code.igst_rate,
        "cess_rate": tax_code.cess_rate,
        "is_active": tax_code.is_active,
    }


def vendor_dict(vendor):
    return {
        "id": vendor.pk,
        "code": vendor.code,
        "name": vendor.name,
        "gstin": vendor.gstin,
        "pan": vendor.pan,
        "email": vendor.email,
        "payment_terms_days": vendor.payment_terms_days,
        "default_expense_account_id": vendor.default_expense_account_id,
        "is_active": vendor.is_active,
    }


def bank_account_dict(bank_account):
    return {
        "id": bank_account.pk,
        "name": bank_account.name,
        "account_number": bank_account.account_number,
        "ifsc": bank_account.ifsc,
        "ledger_account_id": bank_account.ledger_account_id,
        "is_active": bank_account.is_active,
    }


def bill_line_dict(line):
    return {
        "id": line.pk,
        "line_number": line.line_number,
        "description": line.description,
        "account_id": line.account_id,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "discount_percent": line.discount_percent,
        "discount_amount": line.discount_amount,
        "tax_code_id": line.tax_code_id,
        "hsn_sac_code": line.hsn_sac_code,
        "net_amount": line.net_amount,
        "cgst_amount": line.cgst_amount,
        "sgst_amount": line.sgst_amount,
        "igst_amount": line.igst_amount,
        "cess_amount": line.cess_amount,
        "total_amount": line.total_amount,
    }


def payment_dict(payment):
    return {
        "id": payment.pk,
        "bill_id": payment.bill_id,
        "payment_date": payment.payment_date,
        "amount": payment.amount,
        "payment_method": payment.payment_method,
        "bank_account_id": payment.bank_account_id,
        "reference_number": payment.reference_number,
        "cheque_number": payment.cheque_number,
        "tds_amount": payment.tds_amount,
        "tds_section": payment.tds_section,
        "net_amount": payment.net_amount,
        "journal_entry_id": payment.journal_entry_id,
        "created_at": payment.created_at,
    }


def bill_dict(bill, detail=False):
    data = {
        "id": bill.pk,
        "bill_number": bill.bill_number,
        "vendor_id": bill.vendor_id,
        "vendor_name": bill.vendor.name,
        "bill_date": bill.bill_date,
        "due_date": bill.due_date,
        "reference_number": bill.reference_number,
        "is_interstate": bill.is_interstate,
        "status": bill.status,
        "subtotal": bill.subtotal,
        "cgst_amount": bill.cgst_amount,
        "sgst_amount": bill.sgst_amount,
        "igst_amount": bill.igst_amount,
        "cess_amount": bill.cess_amount,
        "total_tax": bill.total_tax,
        "total_amount": bill.total_amount,
        "amount_paid": bill.amount_paid,
        "balance_due": bill.balance_due,
        "journal_entry_id": bill.journal_entry_id,
        "posted_at": bill.posted_at,
    }
    if detail:
        data["notes"] = bill.notes
        data["lines"] = [bill_line_dict(ln) for ln in bill.lines.all()]
        data["payments"] = [payment_dict(p) for p in bill.payments.all()]
    return data


def journal_entry_dict(je):
    lines = [
        {
            "line_number": ln.line_number,
            "account_id": ln.account_id,
            "account_code": ln.account.code,
            "account_name": ln.account.name,
            "description": ln.description,
            "debit_amount": ln.debit_amount,
            "credit_amount": ln.credit_amount,
        }
        for ln in je.lines.select_related("account")
    ]
    return {
        "id": je.pk,
        "entry_number": je.entry_number,
        "entry_type": je.entry_type,
        "entry_date": je.entry_date,
        "description": je.description,
        "status": je.status,
        "posted_at": je.posted_at,
        "reference_type": je.reference_type,
        "reference_id": je.reference_id,
        "total_debit": sum((ln["debit_amount"] for ln in lines), ZERO),
        "total_credit": sum((ln["credit_amount"] for ln in lines), ZERO),
        "lines": lines,
    }
