from ..exceptions import StateConflict
from ..models.period import Period


def resolve_period(company, date):
    """
    Posting date determines the period.
    Dates outside every period are accepted; dates inside a closed one are not.
    """
    period = (
        Period.objects.for_company(company)
        .filter(start_date__lte=date, end_date__gte=date)
        .first()
    )
    if period and period.is_closed:
        raise StateConflict(
            f"Accounting period {period.name} is closed for {date}",
            code="PERIOD_CLOSED",
        )
    return period
