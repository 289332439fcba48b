from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from books_core.exceptions import BooksError
from books_core.services import deactivate_account, post_bill

# ---------- Admin actions ----------


@admin.action(description=_("Post selected draft bills"))
def post_selected_bills(modeladmin, request, queryset):
    """
    Run each selected draft bill through the posting workflow.
    Every bill posts in its own transaction; failures are reported per bill.
    """
    success = failures = 0
    for bill in queryset.filter(status="draft"):
        try:
            post_bill(bill.company, bill.pk, actor=request.user.get_username())
            success += 1
        except BooksError as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not post bill %(number)s: %(err)s") % {"number": bill.bill_number, "err": exc.message},
                level=messages.ERROR,
            )

    modeladmin.message_user(
        request,
        _("Posted %(success)d bills. %(failures)d failed.") % {"success": success, "failures": failures},
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


@admin.action(description=_("Deactivate selected accounts"))
def deactivate_accounts(modeladmin, request, queryset):
    for account in queryset.filter(is_active=True):
        deactivate_account(account.company, account.pk, actor=request.user.get_username())
