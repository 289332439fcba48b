from django.urls import path

from . import views

app_name = "books_core"

urlpatterns = [
    path("bills", views.bills_view, name="bills"),
    path("bills/aging", views.bill_aging_view, name="bill-aging"),
    path("bills/<int:bill_id>", views.bill_detail_view, name="bill-detail"),
    path("bills/<int:bill_id>/post", views.bill_post_view, name="bill-post"),
    path("bill-payments", views.payments_view, name="bill-payments"),
    path("vendors", views.vendors_view, name="vendors"),
    path("accounts", views.accounts_view, name="accounts"),
    path("accounts/<int:account_id>/deactivate", views.account_deactivate_view,
         name="account-deactivate"),
    path("tax-codes", views.tax_codes_view, name="tax-codes"),
    path("tax-codes/calculate", views.tax_calculate_view, name="tax-calculate"),
    path("bank-accounts", views.bank_accounts_view, name="bank-accounts"),
    path("journal-entries/<int:entry_id>", views.journal_entry_view, name="journal-entry"),
    path("trial-balance", views.trial_balance_view, name="trial-balance"),
    path("record-locks", views.record_locks_view, name="record-locks"),
    path("record-locks/<str:entity_type>/<str:entity_id>", views.record_lock_release_view,
         name="record-lock-release"),
]
