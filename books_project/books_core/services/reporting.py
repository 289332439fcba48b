import datetime
from decimal import Decimal

from django.db.models import Count, DecimalField, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from ..models import Bill, JournalLine

ZERO = Decimal("0.00")

AGING_BUCKETS = ("current_amount", "days_1_30", "days_31_60", "days_61_90", "over_90")


def _money_sum(field, **extra):
    return Coalesce(
        Sum(field, **extra), ZERO,
        output_field=DecimalField(max_digits=18, decimal_places=2),
    )


def aging_report(company, as_of=None):
    """
    Outstanding payables per vendor, bucketed by days past due on ``as_of``.
    Only posted/partial bills with a positive balance are counted.
    """
    as_of = as_of or timezone.localdate()
    d30 = as_of - datetime.timedelta(days=30)
    d60 = as_of - datetime.timedelta(days=60)
    d90 = as_of - datetime.timedelta(days=90)

    buckets = {
        "current_amount": Q(due_date__isnull=True) | Q(due_date__gte=as_of),
        "days_1_30": Q(due_date__lt=as_of, due_date__gte=d30),
        "days_31_60": Q(due_date__lt=d30, due_date__gte=d60),
        "days_61_90": Q(due_date__lt=d60, due_date__gte=d90),
        "over_90": Q(due_date__lt=d90),
    }

    rows = (
        Bill.objects.for_company(company)
        .exclude(status="draft")
        .filter(balance_due__gt=0)
        .values("vendor_id", "vendor__code", "vendor__name")
        .annotate(
            bill_count=Count("id"),
            total_outstanding=_money_sum("balance_due"),
            **{name: _money_sum("balance_due", filter=q) for name, q in buckets.items()},
        )
        .order_by("-total_outstanding", "vendor__name")
    )

    vendors = []
    totals = dict.fromkeys(AGING_BUCKETS + ("total_outstanding",), ZERO)
    for row in rows:
        vendors.append({
            "vendor_id": row["vendor_id"],
            "vendor_code": row["vendor__code"],
            "vendor_name": row["vendor__name"],
            "bill_count": row["bill_count"],
            **{k: row[k] for k in totals},
        })
        for k in totals:
            totals[k] += row[k]

    return {"as_of_date": as_of, "vendors": vendors, "totals": totals}


def trial_balance(company, as_of=None):
    """
    Debit/credit totals per account over posted journal lines.
    ``balance`` is signed by the account's normal balance.
    """
    lines = JournalLine.objects.for_company(company).filter(
        journal_entry__status="posted"
    )
    if as_of:
        lines = lines.filter(journal_entry__entry_date__lte=as_of)

    rows = (
        lines.values(
            "account_id", "account__code", "account__name",
            "account__ac_type", "account__normal_balance",
        )
        .annotate(
            total_debit=_money_sum("debit_amount"),
            total_credit=_money_sum("credit_amount"),
        )
        .order_by("account__code")
    )

    accounts = []
    total_debit = total_credit = ZERO
    for row in rows:
        debit, credit = row["total_debit"], row["total_credit"]
        if row["account__normal_balance"] == "credit":
            balance = credit - debit
        else:
            balance = debit - credit
        accounts.append({
            "account_id": row["account_id"],
            "code": row["account__code"],
            "name": row["account__name"],
            "ac_type": row["account__ac_type"],
            "normal_balance": row["account__normal_balance"],
            "total_debit": debit,
            "total_credit": credit,
            "balance": balance,
        })
        total_debit += debit
        total_credit += credit

    return {
        "as_of_date": as_of,
        "accounts": accounts,
        "total_debit": total_debit,
        "total_credit": total_credit,
        "is_balanced": total_debit == total_credit,
    }
