from django.utils.dateparse import parse_date

from . import serializers, services
from .api import actor_for, api_view, filtered, ok, paginate, parse_json
from .exceptions import NotFound, ValidationFailed
from .filters import (AccountFilterSet, BillFilterSet, PaymentFilterSet,
                      TaxCodeFilterSet, VendorFilterSet)
from .forms import (AccountForm, BankAccountForm, BillForm, GstQuoteForm,
                    LockForm, PaymentForm, TaxCodeForm, VendorForm,
                    clean_bill_lines, validated)
from .models import Account, Bill, BillPayment, JournalEntry, TaxCode, Vendor
from .tax import calculate_gst


def _date_param(request, name):
    raw = request.GET.get(name)
    if not raw:
        return None
    value = parse_date(raw)
    if value is None:
        raise ValidationFailed(f"{name} must be a date (YYYY-MM-DD)")
    return value


# ----------------------------
# Bills
# ----------------------------
@api_view("GET", "POST")
def bills_view(request):
    company = request.company
    if request.method == "GET":
        qs = Bill.objects.for_company(company).select_related("vendor")
        qs = paginate(request, filtered(BillFilterSet, request, qs))
        return [serializers.bill_dict(b) for b in qs]

    payload = parse_json(request)
    header = validated(BillForm(payload, company=company))
    lines = clean_bill_lines(company, payload.get("lines") or [])
    bill = services.create_bill(company, header, lines, actor=actor_for(request))
    return ok(serializers.bill_dict(bill, detail=True), status=201)


@api_view("GET", "PATCH", "DELETE")
def bill_detail_view(request, bill_id):
    company = request.company
    if request.method == "GET":
        return serializers.bill_dict(services.get_bill(company, bill_id), detail=True)

    if request.method == "DELETE":
        services.delete_bill(company, bill_id, actor=actor_for(request))
        return {"id": bill_id, "deleted": True}

    bill = services.get_bill(company, bill_id)
    payload = parse_json(request)
    current = {
        "vendor": bill.vendor_id,
        "bill_number": bill.bill_number,
        "bill_date": bill.bill_date,
        "due_date": bill.due_date,
        "reference_number": bill.reference_number,
        "is_interstate": bill.is_interstate,
        "notes": bill.notes,
    }
    header = validated(BillForm({**current, **payload}, company=company))
    lines = None
    if "lines" in payload:
        lines = clean_bill_lines(company, payload["lines"] or [])
    bill = services.update_bill(company, bill_id, header, lines, actor=actor_for(request))
    return serializers.bill_dict(bill, detail=True)


@api_view("POST")
def bill_post_view(request, bill_id):
    bill = services.post_bill(request.company, bill_id, actor=actor_for(request))
    return serializers.bill_dict(bill)


@api_view("GET")
def bill_aging_view(request):
    return services.aging_report(request.company, as_of=_date_param(request, "as_of_date"))


# ----------------------------
# Payments
# ----------------------------
@api_view("GET", "POST")
def payments_view(request):
    company = request.company
    if request.method == "GET":
        qs = BillPayment.objects.for_company(company).select_related("bill")
        qs = paginate(request, filtered(PaymentFilterSet, request, qs))
        return [serializers.payment_dict(p) for p in qs]

    data = validated(PaymentForm(parse_json(request), company=company))
    bill_id = data.pop("bill_id")
    payment = services.record_payment(company, bill_id, data, actor=actor_for(request))
    result = serializers.payment_dict(payment)
    result["bill_status"] = payment.bill.status
    result["balance_due"] = payment.bill.balance_due
    return ok(result, status=201)


# ----------------------------
# Chart of accounts & reference data
# ----------------------------
@api_view("GET", "POST")
def vendors_view(request):
    company = request.company
    if request.method == "GET":
        qs = filtered(VendorFilterSet, request, Vendor.objects.for_company(company))
        return [serializers.vendor_dict(v) for v in paginate(request, qs)]

    data = validated(VendorForm(parse_json(request), company=company))
    vendor = services.create_vendor(company, data, actor=actor_for(request))
    return ok(serializers.vendor_dict(vendor), status=201)


@api_view("GET", "POST")
def accounts_view(request):
    company = request.company
    if request.method == "GET":
        qs = filtered(AccountFilterSet, request, Account.objects.for_company(company))
        return [serializers.account_dict(a) for a in qs]

    data = validated(AccountForm(parse_json(request), company=company))
    account = services.create_account(company, data, actor=actor_for(request))
    return ok(serializers.account_dict(account), status=201)


@api_view("POST")
def account_deactivate_view(request, account_id):
    account = services.deactivate_account(request.company, account_id, actor=actor_for(request))
    return serializers.account_dict(account)


@api_view("GET", "POST")
def tax_codes_view(request):
    company = request.company
    if request.method == "GET":
        qs = filtered(TaxCodeFilterSet, request, TaxCode.objects.for_company(company))
        return [serializers.tax_code_dict(t) for t in qs]

    data = validated(TaxCodeForm(parse_json(request), company=company))
    tax_code = services.create_tax_code(company, data, actor=actor_for(request))
    return ok(serializers.tax_code_dict(tax_code), status=201)


@api_view("POST")
def tax_calculate_view(request):
    data = validated(GstQuoteForm(parse_json(request), company=request.company))
    return calculate_gst(
        data["amount"],
        rate=data.get("rate"),
        is_interstate=data["is_interstate"],
        is_inclusive=data["is_inclusive"],
        cess_rate=data.get("cess_rate"),
        tax_code=data.get("tax_code"),
    )


@api_view("POST")
def bank_accounts_view(request):
    company = request.company
    data = validated(BankAccountForm(parse_json(request), company=company))
    bank_account = services.create_bank_account(company, data, actor=actor_for(request))
    return ok(serializers.bank_account_dict(bank_account), status=201)


# ----------------------------
# Ledger
# ----------------------------
@api_view("GET")
def journal_entry_view(request, entry_id):
    je = JournalEntry.objects.for_company(request.company).filter(pk=entry_id).first()
    if je is None:
        raise NotFound("Journal entry not found")
    return serializers.journal_entry_dict(je)


@api_view("GET")
def trial_balance_view(request):
    return services.trial_balance(request.company, as_of=_date_param(request, "as_of_date"))


# ----------------------------
# Record locks
# ----------------------------
@api_view("GET", "POST")
def record_locks_view(request):
    store = services.get_lock_store()
    if request.method == "GET":
        return store.active_locks(request.company)

    data = validated(LockForm(parse_json(request)))
    return store.acquire(
        request.company,
        data["entity_type"],
        data["entity_id"],
        user_id=data["user_id"] or None,
        user_name=data["user_name"] or None,
    )


@api_view("DELETE")
def record_lock_release_view(request, entity_type, entity_id):
    services.get_lock_store().release(request.company, entity_type, entity_id)
    return {"entity_type": entity_type, "entity_id": entity_id, "released": True}
