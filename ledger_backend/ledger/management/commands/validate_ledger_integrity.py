# ledger/management/commands/validate_ledger_integrity.py

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db.models import Count, Sum

from ledger.models import LedgerStatus
from ledger.services.exceptions import NotFoundError
from ledger.services.kinds import KINDS
from ledger.services.lookups import normalize_ids
from ledger.services.money import ZERO, _money, equal_within_tolerance, exceeds
from ledger.services.status_rules import account_status, installment_status
from payments.models import Payment, PaymentAllocation


class Command(BaseCommand):
    help = "Validate ledger integrity (account totals, numbering, allocations, statuses)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--organization",
            dest="organization_id",
            help="Restrict checks to one organization id (optional)",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any error is found.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))
        organization_id = options.get("organization_id")

        if organization_id:
            try:
                (organization_id,) = normalize_ids([organization_id], label="Organization")
            except NotFoundError:
                self.stderr.write(self.style.ERROR("Invalid --organization id"))
                return self._exit(strict)

        self.stdout.write(self.style.MIGRATE_HEADING("Ledger Integrity Validation"))
        self.stdout.write(
            f"Scope: organization {organization_id}" if organization_id else "Scope: ALL ORGANIZATIONS"
        )
        self.stdout.write("")

        errors = 0
        for kind in KINDS.values():
            errors += self._check_accounts(kind, organization_id)
            errors += self._check_installments(kind, organization_id)
        errors += self._check_payments(organization_id)

        self.stdout.write("")
        if errors == 0:
            self.stdout.write(self.style.SUCCESS("✅ VALIDATION PASSED"))
        else:
            self.stderr.write(self.style.ERROR(f"❌ VALIDATION FOUND ISSUES: {errors} problem(s)"))

        return self._exit(strict and errors > 0)

    # -----------------------------
    # 1) Account aggregates + numbering
    # -----------------------------
    def _check_accounts(self, kind, organization_id) -> int:
        accounts = kind.account_model.objects.all()
        if organization_id:
            accounts = accounts.filter(organization_id=organization_id)

        mismatched = []
        bad_numbering = []

        for account in accounts.iterator():
            rows = list(
                kind.installment_model.objects.filter(account_id=account.id)
                .order_by("installment_number")
                .values_list("installment_number", "amount", "paid_amount", "status")
            )

            amount = _money(sum((r[1] for r in rows), ZERO))
            paid = _money(sum((r[2] for r in rows), ZERO))
            expected_status = account_status(r[3] for r in rows)

            if (
                not equal_within_tolerance(account.amount, amount)
                or not equal_within_tolerance(account.paid_amount, paid)
                or account.total_installments != len(rows)
                or account.status != expected_status
            ):
                mismatched.append(
                    (str(account.id), account.amount, amount, account.paid_amount, paid)
                )

            numbers = [r[0] for r in rows]
            if numbers != list(range(1, len(rows) + 1)):
                bad_numbering.append((str(account.id), numbers))

        label = kind.name.upper()
        if mismatched:
            self.stderr.write(
                self.style.ERROR(f"[FAIL] {label} aggregates out of sync: {len(mismatched)}")
            )
            for aid, stored, derived, stored_paid, derived_paid in mismatched[:10]:
                self.stderr.write(
                    f"  account_id={aid} amount={stored}/{derived} paid={stored_paid}/{derived_paid}"
                )
        else:
            self.stdout.write(self.style.SUCCESS(f"[OK] {label} aggregates match installments"))

        if bad_numbering:
            self.stderr.write(
                self.style.ERROR(f"[FAIL] {label} numbering not contiguous: {len(bad_numbering)}")
            )
            for aid, numbers in bad_numbering[:10]:
                self.stderr.write(f"  account_id={aid} numbers={numbers}")
        else:
            self.stdout.write(self.style.SUCCESS(f"[OK] {label} numbering is 1..N"))

        return len(mismatched) + len(bad_numbering)

    # -----------------------------
    # 2) Installment paid_amount / status vs allocations
    # -----------------------------
    def _check_installments(self, kind, organization_id) -> int:
        installments = kind.installment_model.objects.annotate(
            allocated=Sum("allocations__amount")
        )
        if organization_id:
            installments = installments.filter(account__organization_id=organization_id)

        problems = []
        for inst in installments.iterator():
            allocated = _money(inst.allocated or ZERO)
            if not equal_within_tolerance(inst.paid_amount, allocated):
                problems.append((str(inst.id), f"paid={inst.paid_amount} allocated={allocated}"))
                continue

            if inst.status == LedgerStatus.CANCELLED:
                continue

            expected = installment_status(amount=inst.amount, paid_amount=inst.paid_amount)
            if inst.status != expected:
                problems.append((str(inst.id), f"status={inst.status} expected={expected}"))

        label = kind.name.upper()
        if problems:
            self.stderr.write(
                self.style.ERROR(f"[FAIL] {label} installments inconsistent: {len(problems)}")
            )
            for iid, detail in problems[:10]:
                self.stderr.write(f"  installment_id={iid} {detail}")
        else:
            self.stdout.write(
                self.style.SUCCESS(f"[OK] {label} installments match their allocations")
            )

        return len(problems)

    # -----------------------------
    # 3) Payment amount vs Σ allocations
    # -----------------------------
    def _check_payments(self, organization_id) -> int:
        """
        Over-allocated payments and payments without allocations are errors.
        Under-allocated payments are expected after an account or installment
        cascade removed some of their allocations, so they are only warnings.
        """
        payments = Payment.objects.annotate(
            allocated=Sum("allocations__amount"),
            allocation_count=Count("allocations"),
        )
        if organization_id:
            payments = payments.filter(organization_id=organization_id)

        problems = []
        partial = []
        for payment in payments.iterator():
            allocated = _money(payment.allocated or ZERO)
            if payment.allocation_count == 0 or exceeds(allocated, payment.amount):
                problems.append((str(payment.id), payment.amount, allocated))
            elif not equal_within_tolerance(payment.amount, allocated):
                partial.append((str(payment.id), payment.amount, allocated))

        dangling = PaymentAllocation.objects.filter(
            payable_installment__isnull=True, receivable_installment__isnull=True
        )
        if organization_id:
            dangling = dangling.filter(payment__organization_id=organization_id)
        dangling_count = dangling.count()

        if problems:
            self.stderr.write(
                self.style.ERROR(f"[FAIL] Payments over-allocated or empty: {len(problems)}")
            )
            for pid, amount, allocated in problems[:10]:
                self.stderr.write(f"  payment_id={pid} amount={amount} allocated={allocated}")
        else:
            self.stdout.write(self.style.SUCCESS("[OK] No payment is over-allocated"))

        if partial:
            self.stdout.write(
                self.style.WARNING(f"[WARN] Payments partially allocated: {len(partial)}")
            )
            for pid, amount, allocated in partial[:10]:
                self.stdout.write(f"  payment_id={pid} amount={amount} allocated={allocated}")

        if dangling_count:
            self.stderr.write(
                self.style.ERROR(f"[FAIL] Allocations without a target: {dangling_count}")
            )

        return len(problems) + dangling_count

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
