"""GST arithmetic for purchase lines.

Pure functions over ``Decimal``: nothing here touches the database, so the
same code prices a bill line, backs the ``/api/tax-codes/calculate``
endpoint and is unit-tested without fixtures.

Rounding: every tax component is rounded to paise (0.01, half-up) on its
own, and line totals are the sum of the rounded parts. Bill totals are then
sums of line values, which keeps the posted journal exactly balanced.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def money(value) -> Decimal:
    """Coerce to Decimal and round to 2 places (half-up)."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _pct(amount: Decimal, rate) -> Decimal:
    if not rate:
        return ZERO
    return money(amount * Decimal(rate) / HUNDRED)


@dataclass(frozen=True)
class TaxSplit:
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.cgst + self.sgst + self.igst + self.cess

    def __add__(self, other):
        return TaxSplit(
            cgst=self.cgst + other.cgst,
            sgst=self.sgst + other.sgst,
            igst=self.igst + other.igst,
            cess=self.cess + other.cess,
        )


@dataclass(frozen=True)
class PricedLine:
    gross: Decimal
    discount: Decimal
    net: Decimal
    tax: TaxSplit

    @property
    def total(self) -> Decimal:
        return self.net + self.tax.total


def effective_rates(tax_code, is_interstate):
    """Return (cgst, sgst, igst, cess) percentages for a tax code.

    A component left NULL on the tax code falls back to the headline rate
    (IGST) or half of it (CGST/SGST). An explicit 0 is respected.
    """
    rate = Decimal(tax_code.rate or 0)
    cess = tax_code.cess_rate if tax_code.cess_rate is not None else Decimal("0")
    if is_interstate:
        igst = tax_code.igst_rate if tax_code.igst_rate is not None else rate
        return Decimal("0"), Decimal("0"), Decimal(igst), Decimal(cess)
    half = rate / 2
    cgst = tax_code.cgst_rate if tax_code.cgst_rate is not None else half
    sgst = tax_code.sgst_rate if tax_code.sgst_rate is not None else half
    return Decimal(cgst), Decimal(sgst), Decimal("0"), Decimal(cess)


def split_line_tax(net_amount, tax_code, is_interstate=False) -> TaxSplit:
    if tax_code is None:
        return TaxSplit()
    net = money(net_amount)
    cgst, sgst, igst, cess = effective_rates(tax_code, is_interstate)
    return TaxSplit(
        cgst=_pct(net, cgst),
        sgst=_pct(net, sgst),
        igst=_pct(net, igst),
        cess=_pct(net, cess),
    )


def price_line(quantity, unit_price, discount_percent=0, tax_code=None,
               is_interstate=False) -> PricedLine:
    """quantity × unit_price, less discount, plus the tax split."""
    gross = money(Decimal(str(quantity)) * Decimal(str(unit_price)))
    discount = _pct(gross, Decimal(str(discount_percent or 0)))
    net = gross - discount
    return PricedLine(
        gross=gross,
        discount=discount,
        net=net,
        tax=split_line_tax(net, tax_code, is_interstate),
    )


@dataclass(frozen=True)
class _AdHocRate:
    rate: Decimal
    cgst_rate: Decimal = None
    sgst_rate: Decimal = None
    igst_rate: Decimal = None
    cess_rate: Decimal = None


def calculate_gst(amount, rate=None, is_interstate=False, is_inclusive=False,
                  cess_rate=0, tax_code=None):
    """Quote GST on an amount, either from a TaxCode or a bare rate.

    With ``is_inclusive`` the amount already contains the tax and the
    taxable value is backed out of it first.
    """
    if tax_code is None:
        tax_code = _AdHocRate(rate=Decimal(str(rate or 0)), cess_rate=Decimal(str(cess_rate or 0)))
    amount = money(amount)
    cgst, sgst, igst, cess = effective_rates(tax_code, is_interstate)
    if is_inclusive:
        taxable = money(amount * HUNDRED / (HUNDRED + cgst + sgst + igst + cess))
    else:
        taxable = amount
    split = split_line_tax(taxable, tax_code, is_interstate)
    return {
        "taxable_amount": taxable,
        "cgst_amount": split.cgst,
        "sgst_amount": split.sgst,
        "igst_amount": split.igst,
        "cess_amount": split.cess,
        "total_tax": split.total,
        "total_amount": taxable + split.total,
    }
