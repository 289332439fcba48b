from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from books_core.models import Account, BankAccount, Company, Vendor
from books_core.services import seed_chart_of_accounts


def unique_slug_for_company(name, max_tries=100):
    # "Test Ltd" → "test-ltd" → "test-ltd-1" → ...
    base = slugify(name) or "company"
    slug = base
    i = 1
    while Company.objects.filter(slug=slug).exists():
        slug = f"{base}-{i}"
        i += 1
        if i > max_tries:
            raise CommandError("Couldn't generate unique slug")
    return slug


class Command(BaseCommand):
    help = "Seed the default chart of accounts and GST codes for a company."

    def add_arguments(self, parser):
        parser.add_argument(
            "--company",
            help="Slug of an existing company to seed. Omit to create a new one.",
        )
        parser.add_argument(
            "--company-name",
            default="Demo Company",
            help="Name of the company to create when --company is not given.",
        )
        parser.add_argument(
            "--with-demo",
            action="store_true",
            help="Also create a sample vendor and bank account.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["company"]:
            company = Company.objects.filter(slug=options["company"]).first()
            if company is None:
                raise CommandError(f"No company with slug {options['company']!r}")
        else:
            name = options["company_name"]
            company = Company.objects.create(name=name, slug=unique_slug_for_company(name))
            self.stdout.write(f"Created company {company.name} ({company.slug})")

        created = seed_chart_of_accounts(company)
        self.stdout.write(f"Chart of accounts: {created} new rows")

        if options["with_demo"]:
            rent = Account.objects.get(company=company, code="9200")
            Vendor.objects.get_or_create(
                company=company,
                code="V001",
                defaults={"name": "Demo Landlord", "default_expense_account": rent},
            )
            BankAccount.objects.get_or_create(
                company=company,
                name="Primary Bank",
                defaults={"ledger_account": Account.objects.get(company=company, code="1111")},
            )
            self.stdout.write("Demo vendor and bank account ready")

        self.stdout.write(self.style.SUCCESS(f"Seeded {company.slug}"))
