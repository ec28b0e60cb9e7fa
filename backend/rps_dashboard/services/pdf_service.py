"""
PDF generation service
Calibration certificates and service / calibration / installation job reports

Layout is a single top-down pass: a cursor (mm from the top edge) moves
down the page and a page break is taken before any block that would cross
the bottom limit. Table rows are never split; a row that does not fit
moves to the next page under a redrawn logo and table header. The footer
image is stamped on every page once the page count is known.
"""
import io
import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import structlog
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from rps_dashboard.config import settings
from rps_dashboard.schemas.certificate import CertificateRecord
from rps_dashboard.schemas.documents import DocumentRecord
from rps_dashboard.schemas.service_report import ServiceReportRecord
from rps_dashboard.services.exceptions import AssetLoadError

logger = structlog.get_logger(__name__)

# Page geometry, in mm
PAGE_WIDTH = A4[0] / mm
PAGE_HEIGHT = A4[1] / mm
LEFT_MARGIN = 15
RIGHT_MARGIN = 15
CONTENT_WIDTH = PAGE_WIDTH - LEFT_MARGIN - RIGHT_MARGIN
CONTENT_START_Y = 40

FOOTER_WIDTH = 180
FOOTER_HEIGHT = 15
FOOTER_X = (PAGE_WIDTH - FOOTER_WIDTH) / 2
FOOTER_Y = PAGE_HEIGHT - 20

TABLE_HEADER_HEIGHT = 8

FONT = "Times-Roman"
FONT_BOLD = "Times-Bold"
FONT_ITALIC = "Times-Italic"

TITLE_BLUE = colors.Color(0, 51 / 255, 102 / 255)
REPORT_BLUE = colors.Color(0, 51 / 255, 153 / 255)
VALUE_GREY = colors.Color(50 / 255, 50 / 255, 50 / 255)
MUTED_GREY = colors.Color(100 / 255, 100 / 255, 100 / 255)
EMPTY_GREY = colors.Color(150 / 255, 150 / 255, 150 / 255)
RULE_GREY = colors.Color(180 / 255, 180 / 255, 180 / 255)

CERTIFICATE_TITLE = "CALIBRATION CERTIFICATE"
CERTIFICATE_CONCLUSION = (
    "The above-mentioned Gas Detector was calibrated successfully, and the result "
    "confirms that the performance of the instrument is within acceptable limits."
)
CERTIFICATE_DISCLAIMER = (
    "This certificate is electronically generated and does not require a physical signature."
)
SERVICE_TITLE = "SERVICE / CALIBRATION / INSTALLATION JOB REPORT"


@dataclass(frozen=True)
class TableColumn:
    title: str
    width: float  # mm
    align: str = "left"


@dataclass(frozen=True)
class FieldStyle:
    """How a "label: value" row is drawn"""
    value_x: float
    wrap_width: float
    line_height: float
    font_size: float
    label_suffix: str = ""
    value_prefix: str = ""


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    page_count: int
    filename: str
    media_type: str = "application/pdf"


CERTIFICATE_COLUMNS = (
    TableColumn("Sr. No.", 20, "center"),
    TableColumn("Concentration of Gas", 70),
    TableColumn("Reading Before", 40),
    TableColumn("Reading After", 40),
)

REMARK_COLUMNS = (
    TableColumn("Sr. No.", 15, "center"),
    TableColumn("Service/Spares", 50),
    TableColumn("Part No.", 25),
    TableColumn("Rate", 20),
    TableColumn("Quantity", 20),
    TableColumn("Total", 25),
    TableColumn("PO No.", 25),
)

CERTIFICATE_FIELDS = FieldStyle(
    value_x=LEFT_MARGIN + 57,
    wrap_width=CONTENT_WIDTH - 65,
    line_height=8,
    font_size=11,
    value_prefix=": ",
)

SERVICE_FIELDS = FieldStyle(
    value_x=LEFT_MARGIN + 65,
    wrap_width=CONTENT_WIDTH - 65,
    line_height=6,
    font_size=10,
    label_suffix=":",
)


def _from_top(y: float) -> float:
    """Converts mm from the top edge to reportlab points from the bottom edge."""
    return (PAGE_HEIGHT - y) * mm


def format_date(value: Optional[date]) -> str:
    if not value:
        return "N/A"
    return value.strftime("%d-%m-%Y")


def safe_filename_part(value: Optional[str], default: str) -> str:
    """Lowercases and replaces every non-alphanumeric character with "_"."""
    if not value:
        return default
    return re.sub(r"[^a-z0-9]", "_", value, flags=re.IGNORECASE).lower()


def document_filename(record: DocumentRecord) -> str:
    """
    Deterministic download name built from the document code and customer

    Usage:
        document_filename(certificate)
        # "calibration-certificate-rps_cer_25_26_0007-acme_gases.pdf"
    """
    customer = safe_filename_part(record.customer_name, "unknown_customer")
    if isinstance(record, CertificateRecord):
        code = safe_filename_part(record.certificate_no, record.id or "certificate")
        return f"calibration-certificate-{code}-{customer}.pdf"
    code = safe_filename_part(record.report_no, record.id or "service")
    return f"service-{customer}-{code}.pdf"


class _StampingCanvas(canvas.Canvas):
    """
    Canvas that holds finished pages until save().

    The stamp callback runs on every page once the total page count is
    known, which is how the footer reaches all pages and the disclaimer
    only the last one.
    """

    def __init__(self, *args, stamp: Callable[["_StampingCanvas", int, int], None], **kwargs):
        super().__init__(*args, **kwargs)
        self._stamp = stamp
        self._saved_page_states = []
        self.page_count = 0

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for page_number, state in enumerate(self._saved_page_states, 1):
            self.__dict__.update(state)
            self._stamp(self, page_number, page_count)
            canvas.Canvas.showPage(self)
        self.page_count = page_count
        canvas.Canvas.save(self)


class _Layout:
    """
    Top-down cursor over a canvas

    y is in mm from the top edge. page_break() is the only place that
    starts pages; it redraws the logo and resets the cursor.
    """

    def __init__(self, c: canvas.Canvas, logo: ImageReader,
                 logo_box: Tuple[float, float, float, float], bottom_limit: float):
        self.c = c
        self.logo = logo
        self.logo_box = logo_box
        self.bottom_limit = bottom_limit
        self.y = CONTENT_START_Y
        self.page_count = 1

    # ============ PAGES ============

    def draw_logo(self):
        x, y, w, h = self.logo_box
        self.c.drawImage(self.logo, x * mm, _from_top(y + h), w * mm, h * mm, mask="auto")

    def new_page(self):
        self.c.showPage()
        self.page_count += 1
        self.draw_logo()
        self.y = CONTENT_START_Y

    def fits(self, height: float) -> bool:
        return self.y + height <= self.bottom_limit

    def page_break(self, height: float) -> bool:
        """Starts a new page if a block of this height does not fit. Returns True if it did."""
        # A block taller than a whole page is drawn from the top and allowed to overflow
        if self.fits(height) or self.y <= CONTENT_START_Y:
            return False
        self.new_page()
        return True

    def keep_clear_below(self, height: float, y_limit: float):
        """Starts a new page unless a block of this height, drawn at the cursor, ends above y_limit."""
        if self.y + height > y_limit and self.y > CONTENT_START_Y:
            self.new_page()

    # ============ TEXT ============

    def wrap(self, text: str, width: float, font: str, size: float) -> List[str]:
        return simpleSplit(text or "", font, size, width * mm) or [""]

    def text(self, value: str, x: float, y: float, font: str = FONT, size: float = 10,
             color=colors.black, align: str = "left"):
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        if align == "center":
            self.c.drawCentredString(x * mm, _from_top(y), value)
        elif align == "right":
            self.c.drawRightString(x * mm, _from_top(y), value)
        else:
            self.c.drawString(x * mm, _from_top(y), value)

    def title(self, value: str, size: float, color):
        self.text(value, PAGE_WIDTH / 2, self.y, FONT_BOLD, size, color, align="center")

    def field(self, label: str, value: Optional[str], style: FieldStyle):
        """
        Draws "label: value" with the value wrapped.

        The row is kept on one page when it fits on one; a value longer
        than a page continues line by line on the next.
        """
        lines = self.wrap(value or "N/A", style.wrap_width, FONT, style.font_size)
        self.page_break(len(lines) * style.line_height)

        self.text(label + style.label_suffix, LEFT_MARGIN, self.y, FONT_BOLD, style.font_size)
        for line in lines:
            if not self.fits(style.line_height):
                self.new_page()
            self.text(style.value_prefix + line, style.value_x, self.y, FONT, style.font_size, VALUE_GREY)
            self.y += style.line_height

    def paragraph(self, text: str, size: float, line_height: float):
        lines = self.wrap(text, CONTENT_WIDTH, FONT, size)
        self.page_break(len(lines) * line_height + 10)
        for i, line in enumerate(lines):
            self.text(line, LEFT_MARGIN, self.y + i * line_height, FONT, size)
        self.y += len(lines) * line_height

    def boxed_paragraph(self, heading: str, text: Optional[str], size: float = 9, line_height: float = 6):
        """Heading followed by wrapped text inside a border; long text continues on the next page."""
        lines = self.wrap(text or "No report provided", CONTENT_WIDTH - 5, FONT, size)
        self.page_break(5 + line_height + 5)
        self.text(heading, LEFT_MARGIN, self.y, FONT_BOLD, 10)
        self.y += 5

        while lines:
            room = int((self.bottom_limit - self.y - 5) // line_height)
            if room < 1:
                self.new_page()
                continue
            chunk, lines = lines[:room], lines[room:]
            box_height = len(chunk) * line_height + 5
            self.c.setStrokeColor(colors.black)
            self.c.setLineWidth(0.2 * mm)
            self.c.rect(LEFT_MARGIN * mm, _from_top(self.y + box_height), CONTENT_WIDTH * mm, box_height * mm)
            for i, line in enumerate(chunk):
                self.text(line, LEFT_MARGIN + 2, self.y + 5 + i * line_height, FONT, size)
            self.y += box_height
            if lines:
                self.new_page()

    def rule(self):
        self.c.setStrokeColor(RULE_GREY)
        self.c.setLineWidth(0.3 * mm)
        self.c.line(LEFT_MARGIN * mm, _from_top(self.y), (PAGE_WIDTH - RIGHT_MARGIN) * mm, _from_top(self.y))

    # ============ TABLES ============

    def table_header(self, columns: Sequence[TableColumn], font_size: float):
        self.c.setStrokeColor(colors.black)
        self.c.setLineWidth(0.5 * mm)
        x = LEFT_MARGIN
        for column in columns:
            self.c.rect(x * mm, _from_top(self.y + TABLE_HEADER_HEIGHT),
                        column.width * mm, TABLE_HEADER_HEIGHT * mm)
            self.text(column.title, x + 2, self.y + 6, FONT_BOLD, font_size)
            x += column.width
        self.y += TABLE_HEADER_HEIGHT

    def table(self, columns: Sequence[TableColumn], rows: Sequence[Sequence[str]],
              font_size: float, line_height: float, empty_message: str):
        """
        Draws a table with wrapped cells.

        Row height is the largest wrapped line count of the row times
        line_height; text is centred vertically. A row that does not fit
        goes whole to the next page, below a redrawn header.
        """
        # Header and first row start on the same page
        self.page_break(TABLE_HEADER_HEIGHT + line_height)
        self.table_header(columns, font_size)

        if not rows:
            self.text(empty_message, LEFT_MARGIN, self.y + 6, FONT_ITALIC, font_size, EMPTY_GREY)
            self.y += 8
            return

        for row in rows:
            cell_lines = [
                self.wrap(value, column.width - 4, FONT, font_size)
                for value, column in zip(row, columns)
            ]
            row_height = max(len(lines) for lines in cell_lines) * line_height

            if self.page_break(row_height):
                self.table_header(columns, font_size)

            self.c.setStrokeColor(colors.black)
            self.c.setLineWidth(0.2 * mm)
            x = LEFT_MARGIN
            for lines, column in zip(cell_lines, columns):
                self.c.rect(x * mm, _from_top(self.y + row_height), column.width * mm, row_height * mm)
                offset = (row_height - len(lines) * line_height) / 2
                for i, line in enumerate(lines):
                    baseline = self.y + offset + i * line_height + line_height * 0.7
                    if column.align == "center":
                        self.text(line, x + column.width / 2, baseline, FONT, font_size, align="center")
                    else:
                        self.text(line, x + 2, baseline, FONT, font_size)
                x += column.width
            self.y += row_height


class PDFService:
    """Renders certificate and service report PDFs"""

    def __init__(self, logo_path: Union[str, Path] = None, footer_path: Union[str, Path] = None):
        self.logo_path = Path(logo_path) if logo_path else settings.logo_path
        self.footer_path = Path(footer_path) if footer_path else settings.footer_path

    def _load_image(self, path: Path) -> ImageReader:
        """Loads an image asset, failing the whole render if it is unusable."""
        if not path.is_file():
            raise AssetLoadError(str(path), "file not found")
        try:
            image = ImageReader(str(path))
            image.getSize()
        except (OSError, ValueError) as exc:
            raise AssetLoadError(str(path), str(exc)) from exc
        return image

    def _load_assets(self) -> Tuple[ImageReader, ImageReader]:
        try:
            return self._load_image(self.logo_path), self._load_image(self.footer_path)
        except AssetLoadError as exc:
            logger.error("PDF asset missing, render aborted", path=exc.path, reason=exc.reason)
            raise

    def render(self, record: DocumentRecord, generated_at: datetime = None) -> RenderedDocument:
        """
        Renders any document record

        Args:
            record: CertificateRecord or ServiceReportRecord
            generated_at: Timestamp printed on the last page (default: now)

        Returns:
            RenderedDocument with the PDF bytes, page count and download name

        Raises:
            AssetLoadError if the logo or footer image cannot be loaded
        """
        if isinstance(record, CertificateRecord):
            return self.render_certificate(record, generated_at)
        if isinstance(record, ServiceReportRecord):
            return self.render_service_report(record, generated_at)
        raise TypeError(f"Unsupported document record: {type(record).__name__}")

    def _build(self, record: DocumentRecord, title: str,
               draw: Callable[[_Layout], None],
               logo_box: Tuple[float, float, float, float],
               bottom_limit: float,
               stamp_last_page: Callable[[canvas.Canvas], None]) -> RenderedDocument:
        logo, footer = self._load_assets()
        buffer = io.BytesIO()

        def stamp(c: canvas.Canvas, page_number: int, page_count: int):
            c.drawImage(footer, FOOTER_X * mm, _from_top(FOOTER_Y + FOOTER_HEIGHT),
                        FOOTER_WIDTH * mm, FOOTER_HEIGHT * mm, mask="auto")
            if page_number == page_count:
                stamp_last_page(c)

        c = _StampingCanvas(buffer, pagesize=A4, stamp=stamp)
        c.setTitle(title)
        c.setAuthor(settings.PROJECT_NAME)

        layout = _Layout(c, logo, logo_box, bottom_limit)
        layout.draw_logo()
        draw(layout)
        c.showPage()
        c.save()

        content = buffer.getvalue()
        document = RenderedDocument(
            content=content,
            page_count=c.page_count,
            filename=document_filename(record),
        )
        logger.info(
            "PDF rendered",
            kind=record.kind,
            filename=document.filename,
            pages=document.page_count,
            size=len(content),
        )
        return document

    # ============ CERTIFICATE ============

    def render_certificate(self, record: CertificateRecord, generated_at: datetime = None) -> RenderedDocument:
        """Calibration certificate: fields, observations table, conclusion and signature"""
        generated_at = generated_at or datetime.now()
        disclaimer_y = FOOTER_Y - 20

        def draw(layout: _Layout):
            layout.title(CERTIFICATE_TITLE, 16, TITLE_BLUE)
            layout.y += 12

            for label, value in (
                ("Certificate No.", record.certificate_no),
                ("Customer Name", record.customer_name),
                ("Site Location", record.site_location),
                ("Make & Model", record.make_model),
                ("Range", record.range),
                ("Serial No.", record.serial_no),
                ("Calibration Gas", record.calibration_gas),
                ("Gas Canister Details", record.gas_canister_details),
            ):
                layout.field(label, value, CERTIFICATE_FIELDS)
            layout.y += 5
            layout.field("Date of Calibration", format_date(record.date_of_calibration), CERTIFICATE_FIELDS)
            layout.field("Calibration Due Date", format_date(record.calibration_due_date), CERTIFICATE_FIELDS)
            layout.field("Status", record.status.value, CERTIFICATE_FIELDS)
            layout.y += 5

            layout.page_break(10)
            layout.rule()
            layout.y += 10

            layout.page_break(10 + TABLE_HEADER_HEIGHT + 6)
            layout.text("OBSERVATIONS", LEFT_MARGIN, layout.y, FONT_BOLD, 12, TITLE_BLUE)
            layout.y += 10

            rows = [
                (str(index), obs.gas, obs.before, obs.after)
                for index, obs in enumerate(record.observations, 1)
            ]
            layout.table(CERTIFICATE_COLUMNS, rows, font_size=10, line_height=6,
                         empty_message="No observations recorded")
            layout.y += 15

            layout.paragraph(CERTIFICATE_CONCLUSION, size=10, line_height=6)
            layout.y += 15

            # Last baseline of the block is the engineer name, 10 mm down
            layout.keep_clear_below(10, disclaimer_y - 6)
            right = PAGE_WIDTH - RIGHT_MARGIN
            layout.text("Tested & Calibrated By", right, layout.y, FONT_BOLD, 10, align="right")
            layout.text(record.engineer_name or "________________", right, layout.y + 10,
                        FONT, 10, align="right")
            layout.y += 20

        def last_page(c: canvas.Canvas):
            c.setFont(FONT, 8)
            c.setFillColor(MUTED_GREY)
            c.drawString(LEFT_MARGIN * mm, _from_top(disclaimer_y), CERTIFICATE_DISCLAIMER)
            c.drawString(LEFT_MARGIN * mm, _from_top(disclaimer_y + 10),
                         f"Generated on: {generated_at.strftime('%d-%m-%Y %H:%M:%S')}")

        return self._build(
            record,
            title=f"Calibration Certificate {record.certificate_no}",
            draw=draw,
            logo_box=(2, 10, 60, 20),
            bottom_limit=FOOTER_Y - 5,
            stamp_last_page=last_page,
        )

    # ============ SERVICE REPORT ============

    def render_service_report(self, record: ServiceReportRecord, generated_at: datetime = None) -> RenderedDocument:
        """Service job report: job fields, engineer report, remarks table, customer remarks, signatures"""
        generated_at = generated_at or datetime.now()
        timestamp_y = PAGE_HEIGHT - 30
        engineer = record.service_engineer or record.engineer_name

        def draw(layout: _Layout):
            layout.title(SERVICE_TITLE, 13, REPORT_BLUE)
            layout.y += 10

            for label, value in (
                ("Report No.", record.report_no),
                ("Customer Name", record.customer_name),
                ("Customer Location", record.customer_location),
                ("Contact Person", record.contact_person),
                ("Status", record.status.value),
                ("Contact Number", record.contact_number),
                ("Service Engineer", record.service_engineer),
                ("Date", format_date(record.date)),
                ("Place", record.place),
                ("Place Options", record.place_options),
                ("Nature of Job", record.nature_of_job),
                ("Make & Model Number", record.make_model_number_of_the_instrument_quantity),
            ):
                layout.field(label, value, SERVICE_FIELDS)
            layout.y += 5
            layout.field("Calibrated & Tested OK",
                         record.serial_number_of_the_instrument_calibrated_ok, SERVICE_FIELDS)
            layout.field("Sr.No Faulty/Non-Working",
                         record.serial_number_of_the_faulty_non_working_instruments, SERVICE_FIELDS)
            layout.y += 10

            layout.boxed_paragraph("Engineer Report:", record.engineer_report)
            layout.y += 10

            layout.page_break(8 + TABLE_HEADER_HEIGHT + 7)
            layout.text("ENGINEER REMARKS", LEFT_MARGIN, layout.y, FONT_BOLD, 10)
            layout.y += 8

            rows = [
                (str(index), remark.service_spares, remark.part_no, remark.rate,
                 remark.quantity, remark.total, remark.po_no)
                for index, remark in enumerate(record.engineer_remarks, 1)
            ]
            layout.table(REMARK_COLUMNS, rows, font_size=9, line_height=7,
                         empty_message="No engineer remarks available")
            layout.y += 10

            layout.boxed_paragraph("Customer Remarks:", record.customer_report)

            # Room for the seal, then the signature lines
            layout.keep_clear_below(40, timestamp_y - 6)
            layout.y += 35
            right = PAGE_WIDTH - RIGHT_MARGIN
            layout.text("Customer Name, Seal & Sign", LEFT_MARGIN, layout.y, FONT, 9)
            layout.text("Service Engineer, Seal & Sign", right, layout.y, FONT, 9, align="right")
            layout.text(engineer or "", right, layout.y + 5, FONT, 9, align="right")
            layout.y += 10

        def last_page(c: canvas.Canvas):
            c.setFont(FONT, 9)
            c.setFillColor(MUTED_GREY)
            c.drawString(LEFT_MARGIN * mm, _from_top(timestamp_y),
                         f"Report Generated On: {generated_at.strftime('%d-%m-%Y %H:%M:%S')}")

        return self._build(
            record,
            title=f"Service Report {record.report_no}",
            draw=draw,
            logo_box=(5, 5, 50, 15),
            bottom_limit=timestamp_y,
            stamp_last_page=last_page,
        )


# Singleton instance
pdf_service = PDFService()
