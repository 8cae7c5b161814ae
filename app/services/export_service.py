"""
Export actions for a rendered RPM: print page, clipboard copy and Word file.

The clipboard itself belongs to the browser. `BrowserClipboard` stands in for
it on the server: the client declares which copy primitives it has, the
strategies below pick the first one that works, and the chosen transfer items
go back to the client to be written as-is.
"""
import io
import logging
from typing import Dict, List, Optional, Sequence

from docx import Document
from docx.shared import Pt, RGBColor
from pydantic import BaseModel

from app.errors import ClipboardUnavailable
from app.services.document_renderer import RPMDocument, render_template, to_html, to_text

logger = logging.getLogger(__name__)

COPY_SUCCESS_MESSAGE = "Berhasil menyalin konten! Silakan tempel (Ctrl+V) di Google Dokumen yang akan terbuka."
COPY_FAILED_MESSAGE = "Gagal menyalin otomatis. Harap pilih dan salin manual tabelnya."


class ClipboardPayload(BaseModel):
    html: str
    text: str


class ExportResult(BaseModel):
    success: bool
    strategy: Optional[str] = None
    message: str
    reason: Optional[str] = None
    transfer: Dict[str, str] = {}
    open_url: Optional[str] = None
    open_before_copy: bool = False


class BrowserClipboard:
    def __init__(self, clipboard_api: bool = True, exec_command: bool = True):
        self.clipboard_api = clipboard_api
        self.exec_command = exec_command
        self.method: Optional[str] = None
        self.transfer: Dict[str, str] = {}

    def write_items(self, items: Dict[str, str]) -> None:
        if not self.clipboard_api:
            raise ClipboardUnavailable("navigator.clipboard.write is not available")
        self.method = "clipboard-api"
        self.transfer = dict(items)

    def copy_selection(self, html: str) -> None:
        if not self.exec_command:
            raise ClipboardUnavailable("document.execCommand('copy') is not available")
        self.method = "selection-copy"
        self.transfer = {"text/html": html}


class RichClipboardStrategy:
    name = "clipboard-api"

    def copy(self, payload: ClipboardPayload, writer) -> None:
        writer.write_items({"text/html": payload.html, "text/plain": payload.text})


class SelectionCopyStrategy:
    """Legacy fallback: select the rendered markup and run the copy command."""

    name = "selection-copy"

    def copy(self, payload: ClipboardPayload, writer) -> None:
        writer.copy_selection(payload.html)


DEFAULT_STRATEGIES = (RichClipboardStrategy(), SelectionCopyStrategy())


def build_clipboard_payload(document: RPMDocument) -> ClipboardPayload:
    return ClipboardPayload(html=to_html(document, inline_styles=True), text=to_text(document))


def copy_document(
    payload: ClipboardPayload,
    writer,
    strategies: Sequence = DEFAULT_STRATEGIES,
    open_url: Optional[str] = None,
    open_before_copy: bool = False,
) -> ExportResult:
    """Try each strategy in order. Always returns, never raises."""
    reasons: List[str] = []
    for strategy in strategies:
        try:
            strategy.copy(payload, writer)
        except Exception as e:
            logger.warning(f"Clipboard strategy {strategy.name} failed: {e}")
            reasons.append(f"{strategy.name}: {e}")
            continue

        return ExportResult(
            success=True,
            strategy=strategy.name,
            message=COPY_SUCCESS_MESSAGE,
            reason="; ".join(reasons) or None,
            transfer=getattr(writer, "transfer", {}),
            open_url=open_url,
            open_before_copy=open_before_copy,
        )

    return ExportResult(
        success=False,
        message=COPY_FAILED_MESSAGE,
        reason="; ".join(reasons) or "no clipboard strategy configured",
        # Destination only opens after a successful copy, unless configured to open first
        open_url=open_url if open_before_copy else None,
        open_before_copy=open_before_copy,
    )


def build_print_page(document: RPMDocument, auto_print: bool = True) -> str:
    return render_template("rpm_print.html.j2", doc=document, styles={}, auto_print=auto_print)


def _black_run(paragraph, text: str, bold: bool = False, italic: bool = False, size: int = None):
    run = paragraph.add_run(text)
    run.bold = bold
    run.italic = italic
    run.font.color.rgb = RGBColor(0, 0, 0)
    if size:
        run.font.size = Pt(size)
    return run


def build_docx(document: RPMDocument) -> io.BytesIO:
    doc = Document()

    title = doc.add_paragraph()
    title.alignment = 1
    _black_run(title, document.judul.upper(), bold=True, size=16)
    school = doc.add_paragraph()
    school.alignment = 1
    _black_run(school, document.nama_sekolah.upper(), bold=True, size=13)

    table = doc.add_table(rows=0, cols=2)
    table.style = "Table Grid"

    for section in document.sections:
        cells = table.add_row().cells
        merged = cells[0].merge(cells[1])
        _black_run(merged.paragraphs[0], f"{section.nomor}. {section.judul}", bold=True)

        for row in section.rows:
            cells = table.add_row().cells
            _black_run(cells[0].paragraphs[0], row.label, bold=True)
            if row.items:
                _black_run(cells[1].paragraphs[0], row.items[0])
                for item in row.items[1:]:
                    _black_run(cells[1].add_paragraph(), item)
            else:
                _black_run(cells[1].paragraphs[0], row.value)

        for meeting in section.meetings:
            cells = table.add_row().cells
            _black_run(cells[0].paragraphs[0], f"Pertemuan {meeting.nomor}", bold=True, italic=True)
            _black_run(cells[1].paragraphs[0], meeting.praktik.upper(), bold=True)
            for label, text in (
                ("Memahami (Kegiatan Awal)", meeting.memahami),
                ("Mengaplikasi (Kegiatan Inti)", meeting.mengaplikasi),
                ("Refleksi (Kegiatan Penutup)", meeting.refleksi),
            ):
                cells = table.add_row().cells
                _black_run(cells[0].paragraphs[0], label, italic=True)
                _black_run(cells[1].paragraphs[0], text)

    doc.add_paragraph()
    sig = document.signature
    signature = doc.add_table(rows=3, cols=2)
    left, right = signature.rows[0].cells
    _black_run(left.paragraphs[0], "Mengetahui,")
    _black_run(left.add_paragraph(), f"Kepala {sig.nama_sekolah}", bold=True)
    _black_run(right.paragraphs[0], sig.tempat_tanggal)
    _black_run(right.add_paragraph(), "Guru Mata Pelajaran", bold=True)

    names = signature.rows[1].cells
    for cell, name in ((names[0], sig.nama_kepala_sekolah), (names[1], sig.nama_guru)):
        cell.paragraphs[0].add_run("\n\n\n")
        _black_run(cell.add_paragraph(), name.upper(), bold=True).underline = True

    nips = signature.rows[2].cells
    _black_run(nips[0].paragraphs[0], f"NIP. {sig.nip_kepala_sekolah}")
    _black_run(nips[1].paragraphs[0], f"NIP. {sig.nip_guru}")
    for row in signature.rows:
        for cell in row.cells:
            for paragraph in cell.paragraphs:
                paragraph.alignment = 1

    file_stream = io.BytesIO()
    doc.save(file_stream)
    file_stream.seek(0)
    return file_stream
