import decimal

import books_core.managers
import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=18, **kwargs)


PERCENT = [
    django.core.validators.MinValueValidator(decimal.Decimal("0")),
    django.core.validators.MaxValueValidator(decimal.Decimal("100")),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("currency_code", models.CharField(default="INR", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"verbose_name_plural": "companies"},
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=200)),
                ("ac_type", models.CharField(choices=[("asset", "Asset"), ("liability", "Liability"), ("equity", "Equity"), ("revenue", "Revenue"), ("expense", "Expense")], max_length=10)),
                ("normal_balance", models.CharField(blank=True, choices=[("debit", "Debit"), ("credit", "Credit")], max_length=6)),
                ("is_header", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("is_control_account", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("parent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="children", to="books_core.account")),
            ],
            options={
                "ordering": ("company", "code"),
                "indexes": [
                    models.Index(fields=["company", "ac_type"], name="acct_company_type_idx"),
                    models.Index(fields=["company", "code"], name="acct_company_code_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_account_code"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="Period",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("is_closed", models.BooleanField(default=False)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="books_core.company")),
            ],
            options={
                "ordering": ("company", "start_date"),
                "indexes": [
                    models.Index(fields=["company", "start_date"], name="period_company_start_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"), name="uq_company_period_name"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="TaxCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=255)),
                ("tax_type", models.CharField(choices=[("gst", "GST"), ("tds", "TDS"), ("tcs", "TCS"), ("custom", "Custom")], default="gst", max_length=10)),
                ("rate", models.DecimalField(decimal_places=3, max_digits=6, validators=PERCENT)),
                ("cgst_rate", models.DecimalField(blank=True, decimal_places=3, max_digits=6, null=True, validators=PERCENT)),
                ("sgst_rate", models.DecimalField(blank=True, decimal_places=3, max_digits=6, null=True, validators=PERCENT)),
                ("igst_rate", models.DecimalField(blank=True, decimal_places=3, max_digits=6, null=True, validators=PERCENT)),
                ("cess_rate", models.DecimalField(blank=True, decimal_places=3, max_digits=6, null=True, validators=PERCENT)),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
            ],
            options={
                "ordering": ("company", "tax_type", "rate", "code"),
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_tax_code"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=30)),
                ("name", models.CharField(max_length=200)),
                ("gstin", models.CharField(blank=True, default="", max_length=15, validators=[django.core.validators.RegexValidator("^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$", code="INVALID_GSTIN", message="Invalid GSTIN format")])),
                ("pan", models.CharField(blank=True, default="", max_length=10, validators=[django.core.validators.RegexValidator("^[A-Z]{5}[0-9]{4}[A-Z]$", code="INVALID_PAN", message="Invalid PAN format")])),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("payment_terms_days", models.PositiveIntegerField(default=30)),
                ("is_active", models.BooleanField(default=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("default_expense_account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="vendors_default_expense", to="books_core.account")),
            ],
            options={
                "ordering": ("company", "name"),
                "indexes": [
                    models.Index(fields=["company", "name"], name="vendor_company_name_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_vendor_code"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="BankAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("account_number", models.CharField(blank=True, default="", max_length=34)),
                ("ifsc", models.CharField(blank=True, default="", max_length=11)),
                ("is_active", models.BooleanField(default=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("ledger_account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bank_accounts", to="books_core.account")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"), name="uq_company_bank_account_name"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_number", models.CharField(max_length=72)),
                ("entry_type", models.CharField(choices=[("AP", "Accounts payable"), ("PMT", "Payment")], max_length=5)),
                ("entry_date", models.DateField()),
                ("description", models.TextField(blank=True, default="")),
                ("status", models.CharField(choices=[("draft", "Draft"), ("posted", "Posted")], default="draft", max_length=10)),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("reference_type", models.CharField(choices=[("bill", "Bill"), ("payment", "Payment")], max_length=20)),
                ("reference_id", models.BigIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("period", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="books_core.period")),
            ],
            options={
                "verbose_name_plural": "journal entries",
                "indexes": [
                    models.Index(fields=["company", "entry_date"], name="je_company_date_idx"),
                    models.Index(fields=["company", "status"], name="je_company_status_idx"),
                    models.Index(fields=["company", "reference_type", "reference_id"], name="je_company_ref_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "entry_number"), name="uq_je_company_number"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_number", models.PositiveIntegerField()),
                ("description", models.CharField(blank=True, default="", max_length=400)),
                ("debit_amount", money()),
                ("credit_amount", money()),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("journal_entry", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="books_core.journalentry")),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="journal_lines", to="books_core.account")),
            ],
            options={
                "ordering": ("journal_entry", "line_number"),
                "indexes": [
                    models.Index(fields=["company", "account"], name="jl_company_account_idx"),
                    models.Index(fields=["company", "journal_entry"], name="jl_company_entry_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("journal_entry", "line_number"), name="uq_jl_entry_line_number"),
                    models.CheckConstraint(condition=models.Q(("debit_amount__gte", 0), ("credit_amount__gte", 0)), name="jl_non_negative_amounts"),
                    models.CheckConstraint(condition=models.Q(models.Q(("debit_amount", 0), ("credit_amount", 0)), _negated=True), name="jl_debit_or_credit_nonzero"),
                ],
            },
            managers=[("objects", books_core.managers.JournalLineManager())],
        ),
        migrations.CreateModel(
            name="Bill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bill_number", models.CharField(max_length=64)),
                ("bill_date", models.DateField()),
                ("due_date", models.DateField(blank=True, null=True)),
                ("reference_number", models.CharField(blank=True, default="", max_length=64)),
                ("is_interstate", models.BooleanField(default=False)),
                ("notes", models.TextField(blank=True, default="")),
                ("status", models.CharField(choices=[("draft", "Draft"), ("posted", "Posted"), ("partial", "Partially paid"), ("paid", "Paid")], default="draft", max_length=10)),
                ("subtotal", money()),
                ("cgst_amount", money()),
                ("sgst_amount", money()),
                ("igst_amount", money()),
                ("cess_amount", money()),
                ("total_tax", money()),
                ("total_amount", money()),
                ("amount_paid", money()),
                ("balance_due", money()),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bills", to="books_core.vendor")),
                ("journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="bill", to="books_core.journalentry")),
            ],
            options={
                "ordering": ("-bill_date", "-created_at"),
                "indexes": [
                    models.Index(fields=["company", "vendor"], name="bill_company_vendor_idx"),
                    models.Index(fields=["company", "status"], name="bill_company_status_idx"),
                    models.Index(fields=["company", "bill_date"], name="bill_company_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "bill_number"), name="uq_bill_company_number"),
                    models.CheckConstraint(condition=models.Q(("balance_due__gte", 0)), name="bill_balance_due_non_negative"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="BillLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_number", models.PositiveIntegerField()),
                ("description", models.CharField(blank=True, default="", max_length=400)),
                ("quantity", models.DecimalField(decimal_places=4, default=decimal.Decimal("1"), max_digits=14, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.0001"))])),
                ("unit_price", models.DecimalField(decimal_places=4, default=decimal.Decimal("0"), max_digits=18, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("discount_percent", models.DecimalField(decimal_places=2, default=decimal.Decimal("0"), max_digits=5, validators=PERCENT)),
                ("hsn_sac_code", models.CharField(blank=True, default="", max_length=8)),
                ("discount_amount", money()),
                ("net_amount", money()),
                ("cgst_amount", money()),
                ("sgst_amount", money()),
                ("igst_amount", money()),
                ("cess_amount", money()),
                ("total_amount", money()),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("bill", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="books_core.bill")),
                ("account", models.ForeignKey(help_text="Expense/purchase account for this line", on_delete=django.db.models.deletion.PROTECT, to="books_core.account")),
                ("tax_code", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="books_core.taxcode")),
            ],
            options={
                "ordering": ("bill", "line_number"),
                "indexes": [
                    models.Index(fields=["company", "bill"], name="bl_company_bill_idx"),
                    models.Index(fields=["company", "account"], name="bl_company_account_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("bill", "line_number"), name="uq_bill_line_number"),
                    models.CheckConstraint(condition=models.Q(("quantity__gt", 0), ("unit_price__gte", 0)), name="bl_non_negative_amounts"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="BillPayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("payment_date", models.DateField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))])),
                ("payment_method", models.CharField(choices=[("bank_transfer", "Bank transfer"), ("cheque", "Cheque"), ("cash", "Cash"), ("upi", "UPI"), ("card", "Card")], default="bank_transfer", max_length=20)),
                ("reference_number", models.CharField(blank=True, default="", max_length=64)),
                ("cheque_number", models.CharField(blank=True, default="", max_length=20)),
                ("notes", models.TextField(blank=True, default="")),
                ("tds_amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=18, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0"))])),
                ("tds_section", models.CharField(blank=True, default="", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="books_core.company")),
                ("bill", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="books_core.bill")),
                ("bank_account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="books_core.bankaccount")),
                ("journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payment", to="books_core.journalentry")),
            ],
            options={
                "ordering": ("-payment_date", "-created_at"),
                "indexes": [
                    models.Index(fields=["company", "bill"], name="bp_company_bill_idx"),
                    models.Index(fields=["company", "payment_date"], name="bp_company_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0), ("tds_amount__gte", 0)), name="bp_positive_amounts"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor", models.CharField(blank=True, default="", max_length=100)),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="books_core.company")),
            ],
            options={
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
                    models.Index(fields=["object_type", "object_id"], name="audit_object_idx"),
                ],
            },
            managers=[("objects", books_core.managers.TenantManager())],
        ),
        migrations.CreateModel(
            name="PublishedEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event_id", models.UUIDField(unique=True)),
                ("subject", models.CharField(max_length=100)),
                ("payload", models.JSONField()),
                ("occurred_at", models.DateTimeField()),
                ("delivered_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="books_core.company")),
            ],
            options={
                "ordering": ("-occurred_at",),
                "indexes": [
                    models.Index(fields=["subject", "occurred_at"], name="event_subject_idx"),
                ],
            },
        ),
    ]
