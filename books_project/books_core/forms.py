from django import forms

from .exceptions import ValidationFailed
from .models import Account, BankAccount, BillPayment, TaxCode, Vendor
from .models.payment import PAYMENT_METHODS


def validated(form, prefix=""):
    """Return cleaned_data or raise ValidationFailed with every field error."""
    if form.is_valid():
        return form.cleaned_data
    messages = []
    for field, errors in form.errors.items():
        label = f"{prefix}{field}" if field != "__all__" else prefix.rstrip(".") or "body"
        messages.append(f"{label}: {' '.join(errors)}")
    raise ValidationFailed("; ".join(messages))


class CompanyScopedMixin:
    """Restrict every model choice field to rows of one company.

    ``scoped_fields`` maps field name → (model, only active rows?).
    """

    scoped_fields = {}

    def __init__(self, *args, company=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.company = company
        for name, (model, active_only) in self.scoped_fields.items():
            qs = model.objects.for_company(company)
            if active_only:
                qs = qs.filter(is_active=True)
            self.fields[name].queryset = qs


# ----------------------------
# Bills
# ----------------------------
class BillForm(CompanyScopedMixin, forms.Form):
    scoped_fields = {"vendor": (Vendor, True)}

    vendor = forms.ModelChoiceField(queryset=Vendor.objects.none())
    bill_number = forms.CharField(max_length=64)
    bill_date = forms.DateField()
    due_date = forms.DateField(required=False)
    reference_number = forms.CharField(max_length=64, required=False)
    is_interstate = forms.BooleanField(required=False)
    notes = forms.CharField(required=False)

    def clean(self):
        cleaned = super().clean()
        bill_date, due_date = cleaned.get("bill_date"), cleaned.get("due_date")
        if bill_date and due_date and due_date < bill_date:
            raise forms.ValidationError("due_date cannot be before bill_date")
        return cleaned


class BillLineForm(CompanyScopedMixin, forms.Form):
    scoped_fields = {"account": (Account, True), "tax_code": (TaxCode, True)}

    description = forms.CharField(max_length=400, required=False)
    account = forms.ModelChoiceField(queryset=Account.objects.none())
    quantity = forms.DecimalField(max_digits=14, decimal_places=4, min_value=0.0001)
    unit_price = forms.DecimalField(max_digits=18, decimal_places=4, min_value=0)
    discount_percent = forms.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )
    tax_code = forms.ModelChoiceField(queryset=TaxCode.objects.none(), required=False)
    hsn_sac_code = forms.CharField(max_length=8, required=False)

    def clean_account(self):
        account = self.cleaned_data["account"]
        if account.is_header:
            raise forms.ValidationError(f"Account {account.code} is a header account")
        return account


def clean_bill_lines(company, lines):
    """Validate a list of line dicts; errors name the failing line."""
    if not isinstance(lines, list):
        raise ValidationFailed("lines must be a list")
    cleaned = []
    for index, data in enumerate(lines, start=1):
        if not isinstance(data, dict):
            raise ValidationFailed(f"lines.{index}: must be an object")
        line = validated(BillLineForm(data, company=company), prefix=f"lines.{index}.")
        if line.get("discount_percent") is None:
            line.pop("discount_percent", None)
        cleaned.append(line)
    return cleaned


# ----------------------------
# Payments
# ----------------------------
class PaymentForm(CompanyScopedMixin, forms.Form):
    scoped_fields = {"bank_account": (BankAccount, True)}

    bill_id = forms.IntegerField()
    payment_date = forms.DateField()
    amount = forms.DecimalField(max_digits=18, decimal_places=2, min_value=0.01)
    payment_method = forms.ChoiceField(choices=PAYMENT_METHODS, required=False)
    bank_account = forms.ModelChoiceField(queryset=BankAccount.objects.none(), required=False)
    reference_number = forms.CharField(max_length=64, required=False)
    cheque_number = forms.CharField(max_length=20, required=False)
    notes = forms.CharField(required=False)
    tds_amount = forms.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False)
    tds_section = forms.CharField(max_length=10, required=False)

    def clean(self):
        cleaned = super().clean()
        amount, tds = cleaned.get("amount"), cleaned.get("tds_amount")
        if amount is not None and tds is not None and tds > amount:
            raise forms.ValidationError("TDS cannot exceed the payment amount")
        if not cleaned.get("payment_method"):
            cleaned["payment_method"] = BillPayment._meta.get_field("payment_method").default
        return cleaned


# ----------------------------
# Chart of accounts
# ----------------------------
class ScopedModelForm(CompanyScopedMixin, forms.ModelForm):
    """ModelForm whose fields fall back to the model default when omitted."""

    def __init__(self, *args, company=None, **kwargs):
        kwargs.setdefault("instance", self._meta.model(company=company))
        super().__init__(*args, company=company, **kwargs)
        for name in self.fields:
            if self._meta.model._meta.get_field(name).has_default():
                self.fields[name].required = False

    def clean(self):
        cleaned = super().clean()
        for name in self.fields:
            model_field = self._meta.model._meta.get_field(name)
            if model_field.has_default() and cleaned.get(name) in (None, ""):
                cleaned[name] = model_field.get_default()
        return cleaned


class AccountForm(ScopedModelForm):
    scoped_fields = {"parent": (Account, False)}

    class Meta:
        model = Account
        fields = ("code", "name", "ac_type", "normal_balance", "parent",
                  "is_header", "is_control_account")


class TaxCodeForm(ScopedModelForm):
    class Meta:
        model = TaxCode
        fields = ("code", "name", "tax_type", "rate", "cgst_rate", "sgst_rate",
                  "igst_rate", "cess_rate", "description")


class VendorForm(ScopedModelForm):
    scoped_fields = {"default_expense_account": (Account, True)}

    class Meta:
        model = Vendor
        fields = ("code", "name", "gstin", "pan", "email", "payment_terms_days",
                  "default_expense_account")


class BankAccountForm(ScopedModelForm):
    scoped_fields = {"ledger_account": (Account, True)}

    class Meta:
        model = BankAccount
        fields = ("name", "account_number", "ifsc", "ledger_account")


class GstQuoteForm(CompanyScopedMixin, forms.Form):
    scoped_fields = {"tax_code": (TaxCode, True)}

    amount = forms.DecimalField(max_digits=18, decimal_places=2, min_value=0)
    rate = forms.DecimalField(max_digits=6, decimal_places=3, min_value=0, max_value=100, required=False)
    cess_rate = forms.DecimalField(max_digits=6, decimal_places=3, min_value=0, max_value=100, required=False)
    tax_code = forms.ModelChoiceField(queryset=TaxCode.objects.none(), required=False)
    is_interstate = forms.BooleanField(required=False)
    is_inclusive = forms.BooleanField(required=False)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("tax_code") is None and cleaned.get("rate") is None:
            raise forms.ValidationError("Either tax_code or rate is required")
        return cleaned


class LockForm(forms.Form):
    entity_type = forms.CharField(max_length=50)
    entity_id = forms.CharField(max_length=64)
    user_id = forms.CharField(max_length=64, required=False)
    user_name = forms.CharField(max_length=200, required=False)
