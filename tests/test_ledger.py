from __future__ import annotations

import pytest

from household_budget import ledger as ops
from household_budget.exceptions import (
    DeleteGuardError,
    LedgerValidationError,
    RecordNotFoundError,
)
from household_budget.ledger import Ledger
from household_budget.models import AlertType, NeedsOrWants, Role


def test_onboarding_materializes_current_month(onboarded) -> None:
    assert onboarded.onboarding_completed
    january = [mc for mc in onboarded.monthly_categories if mc.month == '2025-01']
    assert {mc.category_id for mc in january} == {'c1', 'c2'}
    assert all(mc.carry_over_amount == 0.0 for mc in january)


def test_onboarding_requires_primary_member() -> None:
    with pytest.raises(LedgerValidationError):
        ops.complete_onboarding(Ledger(current_month='2025-01'), None, [], [], [])


def test_mutation_returns_new_snapshot(onboarded) -> None:
    updated = ops.add_expense(onboarded, 42.5, 'c1', 'needs', 'u2', '2025-01-03', notes='  market ')

    assert onboarded.expenses == ()
    assert updated.revision == onboarded.revision + 1
    [expense] = updated.expenses
    assert expense.category_name == 'Groceries'
    assert expense.user_name == 'Sam'
    assert expense.needs_or_wants == NeedsOrWants.NEEDS
    assert expense.notes == 'market'
    assert expense.created_by == 'u2'
    assert expense.revisions == ()


@pytest.mark.parametrize("amount", [0, -5, 'abc', None])
def test_invalid_amount_rejected(onboarded, amount) -> None:
    with pytest.raises(LedgerValidationError):
        ops.add_income(onboarded, amount, 's1', 'u1', '2025-01-01')


def test_invalid_date_rejected(onboarded) -> None:
    with pytest.raises(LedgerValidationError):
        ops.add_expense(onboarded, 10, 'c1', 'needs', 'u1', '2025-13-01')


def test_unknown_reference_rejected(onboarded) -> None:
    with pytest.raises(RecordNotFoundError):
        ops.add_income(onboarded, 10, 'missing', 'u1', '2025-01-01')


def test_invalid_email_rejected(onboarded) -> None:
    with pytest.raises(LedgerValidationError):
        ops.add_member(onboarded, 'Kim', 'not-an-email')


def test_rename_keeps_old_transaction_labels(onboarded) -> None:
    ledger = ops.add_expense(onboarded, 10, 'c1', 'wants', 'u1', '2025-01-03')
    ledger = ops.update_category(ledger, 'c1', name='Food')

    assert ledger.category('c1').name == 'Food'
    assert ledger.expenses[0].category_name == 'Groceries'


def test_update_expense_refreshes_names(onboarded) -> None:
    ledger = ops.add_expense(onboarded, 10, 'c1', 'wants', 'u1', '2025-01-03')
    expense_id = ledger.expenses[0].id
    ledger = ops.update_expense(ledger, expense_id, category_id='c2', amount=12)

    assert ledger.expenses[0].category_name == 'Fun'
    assert ledger.expenses[0].amount == 12.0


def test_update_rejects_unknown_fields(onboarded) -> None:
    with pytest.raises(LedgerValidationError):
        ops.update_category(onboarded, 'c1', owner='u1')


def test_cannot_delete_last_member() -> None:
    ledger = ops.add_member(Ledger(current_month='2025-01'), 'Alex', 'alex@example.com', 'primary')
    with pytest.raises(DeleteGuardError, match='Cannot delete the last member'):
        ops.delete_member(ledger, ledger.users[0].id)


def test_cannot_delete_primary_member(onboarded) -> None:
    with pytest.raises(DeleteGuardError, match='Cannot delete the primary member'):
        ops.delete_member(onboarded, 'u1')


def test_delete_regular_member(onboarded) -> None:
    ledger = ops.delete_member(onboarded, 'u2')
    assert [u.id for u in ledger.users] == ['u1']


def test_cannot_demote_only_primary(onboarded) -> None:
    with pytest.raises(DeleteGuardError):
        ops.update_member(onboarded, 'u1', role='member')


def test_promote_then_demote(onboarded) -> None:
    ledger = ops.update_member(onboarded, 'u2', role=Role.PRIMARY)
    ledger = ops.update_member(ledger, 'u1', role='member')
    assert ledger.member('u1').role == Role.MEMBER


def test_income_source_in_use_cannot_be_deleted(onboarded) -> None:
    ledger = ops.add_income(onboarded, 2000, 's1', 'u1', '2025-01-01')
    with pytest.raises(DeleteGuardError) as excinfo:
        ops.delete_income_source(ledger, 's1')
    assert 'It has 1 income record(s)' in str(excinfo.value)
    # the rejected call left the ledger untouched
    assert [s.id for s in ledger.income_sources] == ['s1']


def test_income_source_names_are_unique_case_insensitively(onboarded) -> None:
    with pytest.raises(LedgerValidationError, match='already exists'):
        ops.add_income_source(onboarded, 'SALARY')


def test_delete_unknown_record(onboarded) -> None:
    with pytest.raises(RecordNotFoundError) as excinfo:
        ops.delete_expense(onboarded, 'nope')
    assert str(excinfo.value) == "Expense 'nope' not found"


def test_savings_contribution_updates_goal(onboarded) -> None:
    ledger = ops.add_savings_goal(onboarded, 'Holiday', 1000)
    goal_id = ledger.savings_goals[0].id
    ledger = ops.add_savings_contribution(ledger, goal_id, 150, 'u1', '2025-01-10')
    ledger = ops.add_savings_contribution(ledger, goal_id, 50, 'u2', '2025-01-20')

    assert ledger.savings_goal(goal_id).current_amount == 200.0
    assert sum(c.amount for c in ledger.savings_contributions) == 200.0


def test_add_alert_deduplicates_live_alerts(onboarded) -> None:
    ledger = ops.add_alert(onboarded, AlertType.CATEGORY_WARNING, 'warning', 'Careful', 'c1')
    again = ops.add_alert(ledger, 'category_warning', 'warning', 'Careful again', 'c1')
    assert again is ledger

    dismissed = ops.dismiss_alert(ledger, ledger.alerts[0].id)
    assert ops.active_alerts(dismissed) == []
    readded = ops.add_alert(dismissed, 'category_warning', 'warning', 'Careful again', 'c1')
    assert len(ops.active_alerts(readded)) == 1


def test_update_monthly_category_leaves_template(onboarded) -> None:
    row = next(mc for mc in onboarded.monthly_categories if mc.category_id == 'c1')
    ledger = ops.update_monthly_category(onboarded, row.id, 250)

    assert ledger.category('c1').monthly_budget == 100.0
    assert next(mc for mc in ledger.monthly_categories if mc.id == row.id).monthly_budget == 250.0


def test_monthly_data_and_select_records(onboarded) -> None:
    ledger = ops.add_expense(onboarded, 10, 'c1', 'needs', 'u1', '2025-01-03')
    ledger = ops.add_expense(ledger, 20, 'c2', 'wants', 'u2', '2025-02-03')
    ledger = ops.add_income(ledger, 100, 's1', 'u2', '2025-01-31')

    january = ops.get_monthly_data(ledger, '2025-01')
    assert [e.amount for e in january['expenses']] == [10.0]
    assert len(january['categories']) == 2

    selected = ops.select_records(ledger, start_date='2025-01-01', end_date='2025-02-28', user_id='u2')
    assert [e.amount for e in selected['expenses']] == [20.0]
    assert [i.amount for i in selected['incomes']] == [100.0]


def test_set_current_month_validates(onboarded) -> None:
    assert ops.set_current_month(onboarded, '2025-02').current_month == '2025-02'
    with pytest.raises(ValueError):
        ops.set_current_month(onboarded, 'February')


def test_ledger_round_trips_through_dict(onboarded) -> None:
    ledger = ops.add_expense(onboarded, 10, 'c1', 'needs', 'u1', '2025-01-03')
    assert Ledger.from_dict(ledger.to_dict()) == ledger


def test_from_dict_defaults_missing_keys() -> None:
    ledger = Ledger.from_dict({'revision': 4, 'current_month': '2025-03'})
    assert ledger.revision == 4
    assert ledger.users == ()
    assert not ledger.onboarding_completed


def test_check_invariants(onboarded) -> None:
    assert ops.check_invariants(onboarded) == []

    ledger = ops.add_income(onboarded, 10, 's1', 'u1', '2025-01-01')
    broken = Ledger.from_dict({**ledger.to_dict(), 'income_sources': []})
    assert any('missing income source' in p for p in ops.check_invariants(broken))
