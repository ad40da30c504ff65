from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest

from dairybill.constants import IST
from dairybill.models.payment import Payment, PaymentMethod
from dairybill.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyClientRepository,
    SQLAlchemyPaymentRepository,
)
from dairybill.services.bill_service import BillService
from tests.conftest import NOW


class TestBillServiceQueries:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_payments = MagicMock()
        self.mock_clients = MagicMock()
        self.service = BillService(self.mock_repo, self.mock_payments, self.mock_clients)

    def _bills_by_period(self, mapping):
        self.mock_repo.list_by_month.side_effect = lambda month, year: mapping.get((month, year), [])

    def test_due_bills_span_current_and_previous_period(self, sample_bill):
        overdue_prev = sample_bill(id=1, month=3, due_date=date(2025, 5, 1))
        due_today = sample_bill(id=2, month=3, client_id=2, due_date=date(2025, 5, 2))
        not_yet = sample_bill(id=3, month=4, due_date=date(2025, 6, 10))
        self._bills_by_period({(4, 2025): [not_yet], (3, 2025): [overdue_prev, due_today]})

        result = self.service.get_due_bills(now=NOW)

        assert [b.id for b in result] == [1, 2]
        called = [c.args for c in self.mock_repo.list_by_month.call_args_list]
        assert called == [(4, 2025), (3, 2025)]

    def test_due_bills_in_january_look_at_december(self, sample_bill):
        self._bills_by_period({(11, 2024): [sample_bill(id=1, month=11, year=2024, due_date=date(2025, 1, 10))]})

        result = self.service.get_due_bills(now=datetime(2025, 1, 15, tzinfo=IST))

        assert [b.id for b in result] == [1]

    def test_upcoming_bills(self, sample_bill):
        soon = sample_bill(id=1, due_date=date(2025, 5, 9))
        later = sample_bill(id=2, client_id=2, due_date=date(2025, 5, 10))
        self._bills_by_period({(3, 2025): [soon, later]})

        result = self.service.get_upcoming_due_bills(now=NOW)

        assert [b.id for b in result] == [1]

    def test_upcoming_window_from_settings(self, sample_bill):
        self._bills_by_period({(3, 2025): [sample_bill(id=1, due_date=date(2025, 5, 10))]})
        with patch("dairybill.services.bill_service.settings") as mock_settings:
            mock_settings.upcoming_window_days = 10
            assert [b.id for b in self.service.get_upcoming_due_bills(now=NOW)] == [1]

    def test_payment_stats(self, sample_bill):
        self._bills_by_period(
            {
                (3, 2025): [
                    sample_bill(total_amount=100000, is_paid=True),
                    sample_bill(total_amount=300000, due_date=date(2025, 5, 1)),
                ]
            }
        )
        stats = self.service.get_payment_stats(3, 2025, now=NOW)

        assert stats.total_bills == 2
        assert stats.overdue_bills == 1
        assert stats.collection_rate == pytest.approx(25.0)

    def test_payment_stats_empty_period(self):
        self._bills_by_period({})
        stats = self.service.get_payment_stats(0, 2020, now=NOW)
        assert stats.total_bills == 0
        assert stats.collection_rate == 0.0

    def test_payment_trends_oldest_first(self, sample_bill):
        self._bills_by_period({(4, 2025): [sample_bill(month=4)], (0, 2025): [sample_bill(month=0)]})

        trends = self.service.get_payment_trends(6, now=NOW)

        assert [(t.month, t.year) for t in trends] == [
            (11, 2024),
            (0, 2025),
            (1, 2025),
            (2, 2025),
            (3, 2025),
            (4, 2025),
        ]
        assert trends[0].label == "Dec 2024"
        assert trends[-1].label == "May 2025"
        assert trends[1].stats.total_bills == 1
        assert trends[-1].stats.total_bills == 1
        assert trends[2].stats.total_bills == 0

    def test_clients_with_pending_payments(self, sample_client, sample_bill):
        self.mock_clients.list_all.return_value = [sample_client(id=1), sample_client(id=2)]
        self.mock_repo.list_all.return_value = [sample_bill(client_id=2, total_amount=5000)]

        result = self.service.get_clients_with_pending_payments()

        assert len(result) == 1
        assert result[0].client.id == 2
        assert result[0].pending_amount == 5000

    def test_pending_payments_requires_client_repo(self):
        service = BillService(self.mock_repo)
        with pytest.raises(RuntimeError, match="Client repository not configured"):
            service.get_clients_with_pending_payments()

    def test_get_bill_and_lists(self, sample_bill):
        self.mock_repo.get_by_id.return_value = sample_bill(id=1)
        self.mock_repo.list_by_client.return_value = []
        self.mock_repo.list_by_month.return_value = [sample_bill()]

        assert self.service.get_bill(1).id == 1
        assert self.service.list_client_bills(1) == []
        assert len(self.service.list_bills(3, 2025)) == 1


class TestBillServicePayments:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_payments = MagicMock()
        self.mock_payments.create.side_effect = lambda p: p.model_copy(update={"id": 1, "uuid": "pay-uuid"})
        self.service = BillService(self.mock_repo, self.mock_payments)

    def test_record_payment_defaults_to_bill_total(self, sample_bill):
        bill = sample_bill(id=4, total_amount=558000)

        payment = self.service.record_payment(bill, PaymentMethod.UPI, transaction_id="UPI123", now=NOW)

        assert payment.amount == 558000
        assert payment.method == PaymentMethod.UPI
        assert payment.bill_id == 4
        assert payment.client_id == bill.client_id
        assert payment.paid_at == NOW
        self.mock_repo.update_paid.assert_called_once_with(4, True, NOW)
        assert bill.is_paid is True
        assert bill.paid_date == NOW

    def test_record_partial_amount(self, sample_bill):
        payment = self.service.record_payment(sample_bill(id=4), PaymentMethod.CASH, amount=1000, now=NOW)
        assert payment.amount == 1000

    def test_record_payment_rejects_paid_bill(self, sample_bill):
        bill = sample_bill(id=4, is_paid=True, paid_date=NOW)
        with pytest.raises(ValueError, match="already paid"):
            self.service.record_payment(bill, PaymentMethod.CASH)
        self.mock_payments.create.assert_not_called()

    def test_record_payment_rejects_non_positive(self, sample_bill):
        with pytest.raises(ValueError, match="positive"):
            self.service.record_payment(sample_bill(id=4), PaymentMethod.CASH, amount=0)

    def test_record_payment_requires_id(self, sample_bill):
        with pytest.raises(ValueError, match="without an id"):
            self.service.record_payment(sample_bill(), PaymentMethod.CASH)

    def test_record_payment_requires_repo(self, sample_bill):
        service = BillService(self.mock_repo)
        with pytest.raises(RuntimeError, match="Payment repository not configured"):
            service.record_payment(sample_bill(id=1), PaymentMethod.CASH)

    def test_toggle_paid_marks_as_paid(self, sample_bill):
        result = self.service.toggle_paid(sample_bill(id=1))
        args = self.mock_repo.update_paid.call_args[0]
        assert args[0] == 1
        assert args[1] is True
        assert args[2] is not None
        assert result.is_paid is True
        assert result.paid_date is not None

    def test_toggle_paid_unmarks(self, sample_bill):
        result = self.service.toggle_paid(sample_bill(id=1, is_paid=True, paid_date=NOW))
        self.mock_repo.update_paid.assert_called_once_with(1, False, None)
        assert result.is_paid is False
        assert result.paid_date is None

    def test_toggle_paid_requires_id(self, sample_bill):
        with pytest.raises(ValueError, match="without an id"):
            self.service.toggle_paid(sample_bill())

    def test_list_payments(self):
        self.mock_payments.list_by_bill.return_value = [
            Payment(bill_id=1, client_id=1, amount=100, method=PaymentMethod.CASH)
        ]
        assert len(self.service.list_payments(1)) == 1

    def test_list_payments_without_repo(self):
        assert BillService(self.mock_repo).list_payments(1) == []

    def test_failed_bill_update_removes_payment(self, sample_bill):
        self.mock_repo.update_paid.side_effect = RuntimeError("store unavailable")
        bill = sample_bill(id=4)

        with pytest.raises(RuntimeError, match="store unavailable"):
            self.service.record_payment(bill, PaymentMethod.CASH, now=NOW)

        self.mock_payments.delete.assert_called_once_with(1)
        assert bill.is_paid is False
        assert bill.paid_date is None

    def test_naive_now_is_read_as_india_time(self, sample_bill):
        bill = sample_bill(id=4)
        payment = self.service.record_payment(bill, PaymentMethod.CASH, now=datetime(2025, 5, 2, 9, 0))
        assert payment.paid_at == NOW


class TestBillServicePaymentsWithDatabase:
    def test_failed_bill_update_leaves_no_payment(self, db_connection, sample_client, sample_bill):
        client = SQLAlchemyClientRepository(db_connection).create(sample_client())
        bill_repo = SQLAlchemyBillRepository(db_connection)
        payment_repo = SQLAlchemyPaymentRepository(db_connection)
        bill = bill_repo.create(sample_bill(client_id=client.id))

        failing_bills = MagicMock(wraps=bill_repo)
        failing_bills.update_paid.side_effect = RuntimeError("store unavailable")
        service = BillService(failing_bills, payment_repo)

        with pytest.raises(RuntimeError):
            service.record_payment(bill, PaymentMethod.UPI, now=NOW)

        assert payment_repo.list_by_bill(bill.id) == []
        assert bill_repo.get_by_id(bill.id).is_paid is False

        # a retry succeeds and stores exactly one payment
        BillService(bill_repo, payment_repo).record_payment(bill, PaymentMethod.UPI, now=NOW)
        assert len(payment_repo.list_by_bill(bill.id)) == 1
        assert bill_repo.get_by_id(bill.id).is_paid is True
