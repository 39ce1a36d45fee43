"""
Tests for receipt generation and printing.
"""

import os
from unittest.mock import patch

import pytest

from apps.core.exceptions import PrinterError
from apps.sales.models import OrderItem
from apps.sales.receipt_service import (
    FileReceiptPrinter,
    ReceiptGenerator,
    ReceiptPrinterService,
    get_printer_backend,
)


class FailingPrinter:
    def is_connected(self):
        return True

    def print_pdf(self, pdf_bytes, order):
        raise OSError("device unplugged")


@pytest.fixture
def order(make_order, customer):
    return make_order(
        items=[
            ("latte", "Latte", 2, "4.50"),
            ("croissant", "Butter Croissant With Almond Cream", 1, "3.25"),
        ],
        customer=customer,
        discount="1.00",
    )


@pytest.mark.django_db
class TestReceiptGenerator:
    """Test the ReceiptGenerator class."""

    def test_generate_pdf_receipt(self, order):
        pdf_bytes = ReceiptGenerator(order).generate_pdf_receipt()

        assert isinstance(pdf_bytes, bytes)
        assert pdf_bytes.startswith(b"%PDF")

    def test_page_grows_with_items(self, order, make_order):
        single = make_order()
        assert ReceiptGenerator(order).page_height() > ReceiptGenerator(single).page_height()

    def test_markup_characters_in_text(self, order, shop, customer):
        """Notes and names are printed as text, not parsed as markup."""
        OrderItem.objects.filter(order=order).update(note="oat milk & less <sugar")
        shop.address = "Stall <3> & Co"
        shop.save()
        customer.name = "Tom & <b>Jerry"
        customer.save()
        order.refresh_from_db()

        pdf_bytes = ReceiptGenerator(order).generate_pdf_receipt()

        assert pdf_bytes.startswith(b"%PDF")


@pytest.mark.django_db
class TestReceiptPrinterService:
    """Test ReceiptPrinterService and the file printer backend."""

    def test_file_printer_writes_pdf(self, order, tmp_path):
        service = ReceiptPrinterService(backend=FileReceiptPrinter(directory=str(tmp_path)))

        path = service.print_receipt(order)

        assert path == os.path.join(
            str(tmp_path), str(order.shop_id), f"receipt_{order.short_reference}.pdf"
        )
        with open(path, "rb") as f:
            assert f.read(4) == b"%PDF"

    def test_missing_printer(self, order):
        service = ReceiptPrinterService(backend=None)

        with pytest.raises(PrinterError):
            service.ensure_connected()
        with pytest.raises(PrinterError):
            service.print_receipt(order)

    def test_printer_failure(self, order):
        with pytest.raises(PrinterError) as exc_info:
            ReceiptPrinterService(backend=FailingPrinter()).print_receipt(order)
        assert "device unplugged" in exc_info.value.message

    def test_rendering_failure_is_a_printer_error(self, order, tmp_path):
        service = ReceiptPrinterService(backend=FileReceiptPrinter(directory=str(tmp_path)))

        with patch.object(
            ReceiptGenerator, "generate_pdf_receipt", side_effect=ValueError("Parse error")
        ):
            with pytest.raises(PrinterError) as exc_info:
                service.print_receipt(order)

        assert exc_info.value.message == "The receipt could not be rendered: Parse error"
        assert not os.listdir(str(tmp_path))

    def test_backend_from_settings(self, settings, tmp_path):
        settings.MEDIA_ROOT = str(tmp_path)
        settings.POS_FULFILLMENT = {
            **settings.POS_FULFILLMENT,
            "RECEIPT_PRINTER_BACKEND": "apps.sales.receipt_service.FileReceiptPrinter",
        }

        backend = get_printer_backend()

        assert isinstance(backend, FileReceiptPrinter)
        assert backend.directory == os.path.join(str(tmp_path), "receipts")

    def test_no_backend_configured(self):
        assert get_printer_backend() is None


@pytest.mark.django_db
class TestPrintReceiptTask:
    def test_rendering_failure_is_reported_in_the_result(self, order, tmp_path):
        from apps.sales.tasks import print_receipt_task

        with patch(
            "apps.sales.receipt_service.get_printer_backend",
            return_value=FileReceiptPrinter(directory=str(tmp_path)),
        ), patch.object(
            ReceiptGenerator, "generate_pdf_receipt", side_effect=ValueError("Parse error")
        ):
            outcome = print_receipt_task.apply(args=[str(order.pk)]).get()

        assert outcome == {
            "printed": False,
            "error": "The receipt could not be rendered: Parse error",
        }
