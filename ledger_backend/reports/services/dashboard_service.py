# reports/services/dashboard_service.py

"""
DASHBOARD & REPORT AGGREGATION (READ-ONLY)

Hand-written, parameterized SQL over the ledger tables.

RULES:
- READ-ONLY: no writes, ever
- Always scoped to one organization
- Open installments past their due date are reported in an OVERDUE bucket
  (derived at query time, never stored)
- Money comes back as Decimal(2dp) regardless of backend (sqlite / postgres)
"""

from __future__ import annotations

from datetime import date

from django.db import connection
from django.utils import timezone

from ledger.models import LedgerStatus
from ledger.services.kinds import KINDS, get_kind
from ledger.services.lookups import normalize_ids
from ledger.services.money import ZERO, _money
from organizations.models import Organization
from payments.models import Payment, PaymentAllocation


def _q(name: str) -> str:
    return connection.ops.quote_name(name)


def _org_param(organization_id):
    (uid,) = normalize_ids([organization_id], label="Organization")
    return Organization._meta.pk.get_db_prep_value(uid, connection)


def _date_param(value: date):
    return connection.ops.adapt_datefield_value(value)


def installment_status_summary(
    *,
    kind,
    organization_id,
    start: date,
    end: date,
    today: date | None = None,
) -> dict:
    """
    Per-status totals of installments due in [start, end].

    Returns {status: {"count", "amount", "paid_amount", "outstanding"}} with
    every status present (zeros when empty).
    """
    kind = get_kind(kind)
    today = today or timezone.localdate()

    installments = kind.installment_model._meta.db_table
    accounts = kind.account_model._meta.db_table

    sql = f"""
        SELECT
            CASE
                WHEN i.{_q('status')} IN (%s, %s) AND i.{_q('due_date')} < %s THEN %s
                ELSE i.{_q('status')}
            END AS bucket,
            COUNT(*) AS installment_count,
            COALESCE(SUM(i.{_q('amount')}), 0) AS amount_total,
            COALESCE(SUM(i.{_q('paid_amount')}), 0) AS paid_total
        FROM {_q(installments)} i
        JOIN {_q(accounts)} a ON a.{_q('id')} = i.{_q('account_id')}
        WHERE a.{_q('organization_id')} = %s
          AND i.{_q('due_date')} >= %s
          AND i.{_q('due_date')} <= %s
        GROUP BY bucket
        ORDER BY bucket
    """
    params = [
        LedgerStatus.PENDING,
        LedgerStatus.PARTIAL,
        _date_param(today),
        LedgerStatus.OVERDUE,
        _org_param(organization_id),
        _date_param(start),
        _date_param(end),
    ]

    summary = {
        status: {"count": 0, "amount": ZERO, "paid_amount": ZERO, "outstanding": ZERO}
        for status in (
            LedgerStatus.PENDING,
            LedgerStatus.PARTIAL,
            LedgerStatus.PAID,
            LedgerStatus.CANCELLED,
            LedgerStatus.OVERDUE,
        )
    }

    with connection.cursor() as cursor:
        cursor.execute(sql, params)
        for bucket, count, amount_total, paid_total in cursor.fetchall():
            amount_total = _money(amount_total)
            paid_total = _money(paid_total)
            summary[bucket] = {
                "count": int(count),
                "amount": amount_total,
                "paid_amount": paid_total,
                "outstanding": _money(max(amount_total - paid_total, ZERO)),
            }

    return summary


def payment_totals(*, organization_id, start: date, end: date) -> dict:
    """
    Allocated money per side for payments dated in [start, end]:
    payments -> allocations -> installments -> accounts.

    Returns {"payable": Decimal, "receivable": Decimal}.
    """
    allocations = PaymentAllocation._meta.db_table
    payments = Payment._meta.db_table

    totals = {}
    for kind in KINDS.values():
        installments = kind.installment_model._meta.db_table
        accounts = kind.account_model._meta.db_table
        target_column = f"{kind.allocation_field}_id"

        sql = f"""
            SELECT COALESCE(SUM(pa.{_q('amount')}), 0)
            FROM {_q(payments)} p
            JOIN {_q(allocations)} pa ON pa.{_q('payment_id')} = p.{_q('id')}
            JOIN {_q(installments)} i ON i.{_q('id')} = pa.{_q(target_column)}
            JOIN {_q(accounts)} a ON a.{_q('id')} = i.{_q('account_id')}
            WHERE p.{_q('organization_id')} = %s
              AND a.{_q('organization_id')} = %s
              AND p.{_q('payment_date')} >= %s
              AND p.{_q('payment_date')} <= %s
        """
        org = _org_param(organization_id)
        params = [org, org, _date_param(start), _date_param(end)]

        with connection.cursor() as cursor:
            cursor.execute(sql, params)
            (total,) = cursor.fetchone()
        totals[kind.name] = _money(total)

    return totals


def overdue_installments(
    *,
    kind,
    organization_id,
    start: date,
    end: date,
    today: date | None = None,
    limit: int = 10,
):
    kind = get_kind(kind)
    today = today or timezone.localdate()
    return list(
        kind.installments_for(organization_id)
        .filter(
            status__in=LedgerStatus.OPEN,
            due_date__lt=today,
            due_date__gte=start,
            due_date__lte=end,
        )
        .select_related("account", f"account__{kind.counterparty_field}")
        .order_by("due_date", "installment_number")[:limit]
    )


def dashboard_summary(
    *,
    organization_id,
    start: date,
    end: date,
    today: date | None = None,
) -> dict:
    """
    Organization dashboard for a due-date window:
    per-side status buckets, money moved in the window and net position.
    """
    payables = installment_status_summary(
        kind="payable", organization_id=organization_id, start=start, end=end, today=today
    )
    receivables = installment_status_summary(
        kind="receivable",
        organization_id=organization_id,
        start=start,
        end=end,
        today=today,
    )
    moved = payment_totals(organization_id=organization_id, start=start, end=end)

    def _open_total(summary):
        return _money(
            sum(
                (
                    bucket["outstanding"]
                    for status, bucket in summary.items()
                    if status != LedgerStatus.CANCELLED
                ),
                ZERO,
            )
        )

    to_pay = _open_total(payables)
    to_receive = _open_total(receivables)

    return {
        "period": {"start": start, "end": end},
        "payables": payables,
        "receivables": receivables,
        "paid_in_period": moved["payable"],
        "received_in_period": moved["receivable"],
        "to_pay": to_pay,
        "to_receive": to_receive,
        "net_position": _money(to_receive - to_pay),
    }
