from django.db import models


# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):
        return self.filter(company=company)

    def active(self, company):
        # only rows still usable for new postings
        return self.filter(company=company, is_active=True)


class TenantManager(models.Manager.from_queryset(TenantQuerySet)):
    """Every tenant-owned model gets .for_company() and .active()

    Bill.objects.for_company(request.company)
    """

    use_in_migrations = True


class JournalLineManager(TenantManager):
    def create_for_entry(self, journal_entry, **kwargs):
        # number lines in insertion order unless the caller did
        if "line_number" not in kwargs:
            kwargs["line_number"] = journal_entry.lines.count() + 1
        kwargs.setdefault("company", journal_entry.company)
        return super().create(journal_entry=journal_entry, **kwargs)
