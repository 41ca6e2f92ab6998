"""
tests/test_invoice.py
~~~~~~~~~~~~~~~~~~~~~
Tests for haulbook.reports.invoice — generate_invoice, Invoice, BillDetails.
"""

from __future__ import annotations

import json
import re
from datetime import date
from decimal import Decimal

import pytest

from haulbook.reports.invoice import BillDetails, Invoice, generate_invoice, new_bill_number

MARCH = "2024-03"
ISSUED = date(2024, 4, 1)


class TestGenerateInvoice:
    def test_single_entry_at_default_rate(self, entry_factory):
        inv = generate_invoice([entry_factory(amount="1000")], MARCH, today=ISSUED)
        assert inv.totals.subtotal == Decimal("1000")
        assert inv.totals.tax == Decimal("180")
        assert inv.totals.total == Decimal("1180")

    def test_only_month_entries(self, sample_entries):
        inv = generate_invoice(sample_entries, MARCH, today=ISSUED)
        assert [e.id for e in inv.entries] == ["a", "b"]
        assert inv.totals.subtotal == Decimal("4500")

    def test_unbilled_lines_listed_but_add_nothing(self, sample_entries):
        inv = generate_invoice(sample_entries, MARCH, today=ISSUED)
        assert any(e.amount is None for e in inv.entries)
        assert inv.total_quantity == Decimal("20.5")

    def test_no_month_gives_empty_bill(self, sample_entries):
        inv = generate_invoice(sample_entries, None, today=ISSUED)
        assert inv.is_empty
        assert inv.totals.total == 0
        assert inv.period_label == "—"

    def test_month_without_entries(self, sample_entries):
        inv = generate_invoice(sample_entries, "2023-06", today=ISSUED)
        assert inv.is_empty
        assert inv.month == "2023-06"

    def test_lines_sorted_by_date(self, entry_factory):
        later = entry_factory(id="late", entry_date=date(2024, 3, 20))
        earlier = entry_factory(id="early", entry_date=date(2024, 3, 2))
        inv = generate_invoice([later, earlier], MARCH, today=ISSUED)
        assert [e.id for e in inv.entries] == ["early", "late"]

    def test_explicit_tax_rate(self, entry_factory):
        inv = generate_invoice([entry_factory(amount="200")], MARCH, tax_rate="0.05", today=ISSUED)
        assert inv.totals.tax == Decimal("10")
        assert inv.totals.total == Decimal("210")

    def test_rate_from_config(self, entry_factory, mocker):
        mocker.patch("haulbook.reports.invoice.cfg.tax_rate", 0.12)
        inv = generate_invoice([entry_factory(amount="100")], MARCH, today=ISSUED)
        assert inv.totals.tax == Decimal("12")

    def test_issued_on(self, entry_factory):
        assert generate_invoice([entry_factory()], MARCH, today=ISSUED).issued_on == ISSUED


class TestBillDetails:
    def test_bill_number_format(self):
        assert re.fullmatch(r"BILL-\d{6}", new_bill_number())

    def test_default_bill_number(self):
        assert BillDetails().bill_no.startswith("BILL-")

    def test_resolved_fills_sender_from_config(self, mocker):
        mocker.patch("haulbook.reports.invoice.cfg.company_name", "Shree Transport")
        mocker.patch("haulbook.reports.invoice.cfg.company_address", "Pune")
        resolved = BillDetails(bill_to="Acme", bill_no="BILL-000001").resolved()
        assert resolved.bill_from == "Shree Transport"
        assert resolved.address == "Pune"
        assert resolved.bill_to == "Acme"
        assert resolved.bill_no == "BILL-000001"

    def test_explicit_sender_kept(self):
        resolved = BillDetails(bill_from="Own Co", address="Nagpur", gst_no="27ABCDE1234F1Z5").resolved()
        assert resolved.bill_from == "Own Co"
        assert resolved.address == "Nagpur"
        assert resolved.gst_no == "27ABCDE1234F1Z5"

    def test_to_dict(self):
        d = BillDetails(bill_to="Acme", bill_no="BILL-1").to_dict()
        assert d["bill_to"] == "Acme"
        assert d["bill_no"] == "BILL-1"


class TestInvoiceExport:
    @pytest.fixture
    def invoice(self, sample_entries) -> Invoice:
        return generate_invoice(
            sample_entries, MARCH,
            BillDetails(bill_to="Acme Cement", bill_from="Aryan Enterprises", bill_no="BILL-123456"),
            tax_rate="0.18", today=ISSUED,
        )

    def test_to_dict_rounds_money(self, invoice):
        d = invoice.to_dict()
        assert d["subtotal"] == "4500.00"
        assert d["tax"] == "810.00"
        assert d["total"] == "5310.00"
        assert d["tax_rate"] == "0.18"
        assert d["period"] == "March 2024"
        assert d["issued_on"] == "2024-04-01"
        assert d["bill_no"] == "BILL-123456"
        assert len(d["entries"]) == 2

    def test_to_json_writes_file(self, invoice, tmp_path):
        path = tmp_path / "bill.json"
        raw = invoice.to_json(path)
        assert json.loads(path.read_text(encoding="utf-8")) == json.loads(raw)

    def test_summary(self, invoice):
        text = invoice.summary(currency="INR")
        assert "BILL-123456" in text
        assert "Acme Cement" in text
        assert "March 2024" in text
        assert "GST (18%)" in text
        assert "5310.00" in text

    def test_empty_summary(self):
        text = generate_invoice([], MARCH, BillDetails(bill_no="BILL-1"), today=ISSUED).summary()
        assert "No entries for this period." in text
