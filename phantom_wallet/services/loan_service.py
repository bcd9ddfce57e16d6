"""Loan lifecycle manager - orchestrates disbursement, repayment and collateral recovery"""

import time
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from phantom_wallet.config import Settings, settings as default_settings
from phantom_wallet.domain.eligibility import active_savings, get_loan_eligibility
from phantom_wallet.domain.exceptions import AmountExceedsLimit, IneligibleForLoan, InvalidInput
from phantom_wallet.domain.loan_interest import calculate_loan_interest, generate_repayment_schedule
from phantom_wallet.domain.loans import apply_repayment, disburse_loan, find_loan, replace_loan
from phantom_wallet.domain.models import (
    Loan,
    LoanDisbursement,
    LoanEligibility,
    LoanOffer,
    LoanStatus,
    RecoveryResult,
    RepaymentResult,
    RevenueEvent,
)
from phantom_wallet.domain.savings import replace_account, settle_withdrawal
from phantom_wallet.infrastructure.clients.wallet import WalletClient
from phantom_wallet.infrastructure.database.repositories import LoanRepository, SavingsRepository, transaction
from phantom_wallet.infrastructure.observability.logging import log_loan_event
from phantom_wallet.infrastructure.observability.metrics import (
    loan_repayment_counter,
    record_disbursement,
    record_eligibility,
    savings_withdrawal_counter,
)
from phantom_wallet.services.locks import UserLockRegistry
from phantom_wallet.services.common import require_user, settlement_events
from phantom_wallet.utils.date_utils import utc_now
from phantom_wallet.utils.money_utils import to_money


class LoanService:
    """Loan operations for one request; state lives in the repositories, not here"""

    def __init__(
        self,
        db: Session,
        wallet: WalletClient,
        locks: UserLockRegistry,
        clock: Callable[[], datetime] = utc_now,
        config: Settings = default_settings,
    ):
        self.db = db
        self.loans = LoanRepository(db)
        self.savings = SavingsRepository(db)
        self.wallet = wallet
        self.locks = locks
        self.clock = clock
        self.config = config

    def list_loans(self, user_id: Optional[str]) -> List[Loan]:
        """Loans with the derived overdue status applied"""
        user_id = require_user(user_id)
        now = self.clock()
        return [replace(loan, status=loan.effective_status(now)) for loan in self.loans.get_loans(user_id)]

    def get_eligibility(self, user_id: Optional[str]) -> LoanEligibility:
        user_id = require_user(user_id)
        eligibility = get_loan_eligibility(
            self.savings.get_accounts(user_id),
            self.loans.get_loans(user_id),
            self.config.minimum_loan_amount,
        )
        record_eligibility(eligibility.eligible)
        return eligibility

    async def quote(self, user_id: Optional[str], amount: Decimal) -> LoanOffer:
        """Interest quote at the user's current tier; identical to what apply() persists"""
        user_id = require_user(user_id)
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidInput("loan amount must be positive")
        tier = await self.wallet.get_premium_tier(user_id)
        quote = calculate_loan_interest(amount, tier, self.config.loan_term_months)
        schedule = generate_repayment_schedule(
            quote.total_repayment, quote.total_interest, self.clock(), self.config.loan_term_months
        )
        return LoanOffer(quote=quote, schedule=schedule)

    async def apply(self, user_id: Optional[str], amount: Decimal) -> LoanDisbursement:
        """
        Disburse a loan against the user's pooled savings.

        Flow:
        1. Read tier, savings and loans under the user's lock
        2. Validate eligibility, limits and collateral coverage
        3. Persist the loan and credit the principal in one transaction
        4. Return the loan interest event for the revenue ledger; callers
           deliver it after responding
        """
        user_id = require_user(user_id)
        start_time = time.time()

        async with self.locks.lock(user_id):
            now = self.clock()
            tier = await self.wallet.get_premium_tier(user_id)
            accounts = self.savings.get_accounts(user_id)
            loans = self.loans.get_loans(user_id)

            try:
                loan = disburse_loan(
                    owner_id=user_id,
                    amount=amount,
                    tier=tier,
                    accounts=accounts,
                    loans=loans,
                    now=now,
                    minimum_loan_amount=self.config.minimum_loan_amount,
                    term_months=self.config.loan_term_months,
                )
            except IneligibleForLoan:
                record_eligibility(False)
                raise
            record_eligibility(True)

            balance = await self.wallet.get_balance(user_id)
            with transaction(self.db):
                self.loans.save_loans(user_id, loans + [loan])
                await self.wallet.set_balance(user_id, balance + loan.amount)

        record_disbursement(tier.value, loan.amount)
        interest_event = RevenueEvent(
            amount=loan.total_interest,
            category="loan_interest",
            source_id=loan.id,
            user_id=user_id,
            description=f"Loan interest revenue from loan ({loan.interest_rate}% rate)",
        )

        log_loan_event(
            "disbursement",
            user_id,
            loan.id,
            loan.amount,
            (time.time() - start_time) * 1000,
            tier=tier.value,
            total_repayment=loan.total_repayment,
        )
        return LoanDisbursement(loan=loan, credited_amount=loan.amount, revenue_events=[interest_event])

    async def repay(self, user_id: Optional[str], loan_id: str, amount: Decimal) -> RepaymentResult:
        """
        Apply a repayment from the wallet balance.

        Callers must submit each repayment intent once; replays are counted again.
        """
        user_id = require_user(user_id)
        start_time = time.time()

        async with self.locks.lock(user_id):
            loans = self.loans.get_loans(user_id)
            amount = to_money(amount)
            if amount <= 0:
                raise InvalidInput("repayment amount must be positive")
            loan = find_loan(loans, loan_id)
            updated = apply_repayment(loan, amount)

            balance = await self.wallet.get_balance(user_id)
            if amount > balance:
                raise AmountExceedsLimit("amount exceeds available funds")

            with transaction(self.db):
                self.loans.save_loans(user_id, replace_loan(loans, updated))
                await self.wallet.set_balance(user_id, balance - amount)

        loan_repayment_counter.labels(outcome="repaid" if updated.status == LoanStatus.REPAID else "partial").inc()
        log_loan_event(
            "repayment",
            user_id,
            loan_id,
            amount,
            (time.time() - start_time) * 1000,
            remaining_amount=updated.remaining_amount,
            status=updated.status.value,
        )
        return RepaymentResult(loan=updated, debited_amount=amount)

    async def recover_from_collateral(self, user_id: Optional[str], loan_id: str) -> RecoveryResult:
        """
        Auto-deduct hook: settle an overdue loan from the user's savings.

        Active accounts are withdrawn soonest-maturing first (early ones take
        the penalty) and their payouts applied to the loan until it is repaid.
        Whatever the last account pays beyond the debt goes to the wallet.
        """
        user_id = require_user(user_id)
        start_time = time.time()

        async with self.locks.lock(user_id):
            now = self.clock()
            loans = self.loans.get_loans(user_id)
            loan = find_loan(loans, loan_id)
            if loan.effective_status(now) != LoanStatus.OVERDUE:
                raise InvalidInput("loan is not overdue")
            if not loan.auto_deduct_from_savings:
                raise InvalidInput("loan does not allow deduction from savings")

            accounts = self.savings.get_accounts(user_id)
            candidates = sorted(active_savings(accounts), key=lambda a: a.maturity_date)
            if not candidates:
                raise InvalidInput("no active savings available for recovery")

            settlements = []
            surplus = Decimal("0")
            for account in candidates:
                if loan.remaining_amount == 0:
                    break
                settlement = settle_withdrawal(account, now, self.config.early_withdrawal_penalty_rate)
                applied = min(settlement.payout, loan.remaining_amount)
                loan = apply_repayment(loan, applied)
                surplus += settlement.payout - applied
                accounts = replace_account(accounts, settlement.account)
                settlements.append(settlement)

            with transaction(self.db):
                self.savings.save_accounts(user_id, accounts)
                self.loans.save_loans(user_id, replace_loan(loans, loan))
                if surplus > 0:
                    balance = await self.wallet.get_balance(user_id)
                    await self.wallet.set_balance(user_id, balance + surplus)

        events = []
        for settlement in settlements:
            savings_withdrawal_counter.labels(kind="recovery").inc()
            events.extend(settlement_events(settlement, user_id, f"collateral recovery for loan {loan.id}"))

        log_loan_event(
            "recovery",
            user_id,
            loan.id,
            sum((s.payout for s in settlements), Decimal("0")),
            (time.time() - start_time) * 1000,
            accounts_withdrawn=len(settlements),
            remaining_amount=loan.remaining_amount,
        )
        return RecoveryResult(loan=loan, settlements=settlements, credited_amount=surplus, revenue_events=events)
