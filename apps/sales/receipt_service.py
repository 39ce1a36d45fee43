"""
Receipt generation and printing for POS orders.

- Render an 80mm thermal receipt as PDF with reportlab
- Send the rendered receipt to the configured printer backend

Printing is best effort: a missing or failing printer raises PrinterError,
which callers report as an informational notice only.
"""

import io
import logging
import os
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

from reportlab.lib import colors
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError
from reportlab.platypus.flowables import HRFlowable

from apps.core.conf import fulfillment_setting
from apps.core.exceptions import PrinterError

from .models import Order

logger = logging.getLogger(__name__)


class ReceiptGenerator:
    """
    Thermal receipt generator for POS orders.
    """

    # Receipt dimensions
    THERMAL_WIDTH = 80 * mm
    THERMAL_MARGIN = 4 * mm
    BASE_HEIGHT = 110 * mm
    LINE_HEIGHT = 6 * mm

    def __init__(self, order: Order):
        self.order = order
        self.shop = order.shop
        self.items = list(order.items.all())
        self.styles = getSampleStyleSheet()
        self._create_custom_styles()

    def _create_custom_styles(self):
        self.shop_style = ParagraphStyle(
            "ThermalShop",
            parent=self.styles["Heading1"],
            fontSize=13,
            spaceAfter=4,
            alignment=1,  # Center alignment
            textColor=colors.black,
            fontName="Helvetica-Bold",
        )

        self.body_style = ParagraphStyle(
            "ThermalBody",
            parent=self.styles["Normal"],
            fontSize=8,
            spaceAfter=3,
            alignment=0,  # Left alignment
            textColor=colors.black,
        )

        self.total_style = ParagraphStyle(
            "ThermalTotal",
            parent=self.styles["Normal"],
            fontSize=10,
            spaceAfter=4,
            alignment=2,  # Right alignment
            textColor=colors.black,
            fontName="Helvetica-Bold",
        )

    def page_height(self):
        return self.BASE_HEIGHT + self.LINE_HEIGHT * len(self.items)

    def generate_pdf_receipt(self) -> bytes:
        """
        Render the receipt.

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=(self.THERMAL_WIDTH, self.page_height()),
            rightMargin=self.THERMAL_MARGIN,
            leftMargin=self.THERMAL_MARGIN,
            topMargin=self.THERMAL_MARGIN,
            bottomMargin=self.THERMAL_MARGIN,
        )
        doc.build(self._build_content())
        pdf_bytes = buffer.getvalue()
        buffer.close()
        return pdf_bytes

    def _build_content(self):
        story = []
        story.append(Paragraph(escape(self.shop.name), self.shop_style))
        if self.shop.address:
            address = escape(self.shop.address)
            story.append(Paragraph(f"<para align='center'>{address}</para>", self.body_style))
        story.append(Spacer(1, 6))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.black))
        story.append(Spacer(1, 6))

        created = timezone.localtime(self.order.created_at, self.shop.zone)
        info = [
            f"Order #: {self.order.short_reference}",
            f"Date: {created.strftime('%Y-%m-%d %H:%M')}",
        ]
        if self.order.terminal_id:
            info.append(f"Terminal: {escape(self.order.terminal_id)}")
        if self.order.customer:
            info.append(f"Customer: {escape(self.order.customer.name)}")
        for line in info:
            story.append(Paragraph(line, self.body_style))
        story.append(Spacer(1, 6))

        story.append(self._build_items_table())
        story.append(Spacer(1, 6))

        totals = [f"Subtotal: {self.order.subtotal:.2f}"]
        if self.order.discount:
            totals.append(f"Discount: -{self.order.discount:.2f}")
        for total in totals:
            story.append(Paragraph(f"<para align='right'>{total}</para>", self.body_style))
        story.append(HRFlowable(width="100%", thickness=2, color=colors.black))
        story.append(Paragraph(f"TOTAL: {self.order.total:.2f}", self.total_style))

        payment_method = dict(Order.PAYMENT_METHOD_CHOICES).get(
            self.order.payment_method, self.order.payment_method
        )
        story.append(Paragraph(f"Payment Method: {payment_method}", self.body_style))
        story.append(Spacer(1, 6))
        story.append(Paragraph("<para align='center'>Thank you!</para>", self.body_style))
        return story

    def _build_items_table(self):
        data = [["Item", "Qty", "Price", "Total"]]
        for item in self.items:
            name = escape(item.name[:20]) + ("..." if len(item.name) > 20 else "")
            options = [item.get_temperature_display(), item.get_consumption_display()]
            if item.note:
                options.append(escape(item.note[:20]))
            data.append(
                [
                    Paragraph(
                        f"{name}<br/><font size=6>{', '.join(options)}</font>", self.body_style
                    ),
                    str(item.quantity),
                    f"{item.price:.2f}",
                    f"{item.subtotal:.2f}",
                ]
            )

        table = Table(data, colWidths=[34 * mm, 8 * mm, 14 * mm, 16 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 7),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
                ]
            )
        )
        return table


class FileReceiptPrinter:
    """
    Printer backend that writes receipts as PDF files under MEDIA_ROOT.

    Useful for terminals whose print spooler watches a directory.
    """

    def __init__(self, directory=None):
        self.directory = directory or os.path.join(settings.MEDIA_ROOT, "receipts")

    def is_connected(self) -> bool:
        return True

    def print_pdf(self, pdf_bytes: bytes, order) -> str:
        receipts_dir = os.path.join(self.directory, str(order.shop_id))
        os.makedirs(receipts_dir, exist_ok=True)

        file_path = os.path.join(receipts_dir, f"receipt_{order.short_reference}.pdf")
        with open(file_path, "wb") as f:
            f.write(pdf_bytes)
        return file_path


def get_printer_backend():
    """
    Instantiate the printer backend named by POS_FULFILLMENT["RECEIPT_PRINTER_BACKEND"].

    Returns:
        Backend instance, or None if no printer is configured
    """
    path = fulfillment_setting("RECEIPT_PRINTER_BACKEND")
    if not path:
        return None
    return import_string(path)()


class ReceiptPrinterService:
    """
    Render and print order receipts.

    Args:
        backend: Printer backend (defaults to the configured one)
    """

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else get_printer_backend()

    def ensure_connected(self):
        """
        Raises:
            PrinterError: If no printer is configured or it is not connected
        """
        if self.backend is None or not self.backend.is_connected():
            raise PrinterError()

    def print_receipt(self, order: Order):
        """
        Print the receipt of an order.

        Raises:
            PrinterError: If no printer is configured or connected, or the
                receipt could not be rendered or printed
        """
        self.ensure_connected()

        try:
            pdf_bytes = ReceiptGenerator(order).generate_pdf_receipt()
        except (ValueError, LayoutError) as exc:
            logger.exception(f"Rendering receipt for order {order.short_reference} failed")
            raise PrinterError(f"The receipt could not be rendered: {exc}") from exc

        try:
            result = self.backend.print_pdf(pdf_bytes, order)
        except OSError as exc:
            logger.warning(f"Printing receipt for order {order.short_reference} failed: {exc}")
            raise PrinterError(f"Printing the receipt failed: {exc}") from exc

        logger.info(f"Printed receipt for order {order.short_reference}")
        return result
