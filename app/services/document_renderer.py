from datetime import date
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader
from pydantic import BaseModel

from app.schemas.rpm_schema import (
    FormData,
    GeneratedRPM,
    GeneratedRPMMendalam,
    ordered_dimensions,
)
from app.utils.time_utils import format_tanggal, get_jakarta_time

DOCUMENT_TITLE = "Perencanaan Pembelajaran Mendalam (RPM)"
DIMENSION_SEPARATOR = ", "

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# Inline styles for paste targets (Google Docs / Word drop <style> blocks)
INLINE_STYLES = {
    "table": "width:100%;border-collapse:collapse;border:1px solid #000;font-family:Arial,sans-serif;font-size:13px;",
    "section": "background:#f3f4f6;font-weight:bold;border:1px solid #000;padding:8px 12px;text-transform:uppercase;",
    "label": "width:30%;border:1px solid #000;padding:10px;font-weight:600;vertical-align:top;",
    "value": "border:1px solid #000;padding:10px;vertical-align:top;white-space:pre-wrap;",
    "meeting": "border:1px solid #000;padding:6px;font-weight:bold;font-style:italic;text-align:center;background:#eef2ff;",
    "practice": "border:1px solid #000;padding:6px;font-weight:bold;text-transform:uppercase;background:#eef2ff;",
    "heading": "text-align:center;margin-bottom:32px;border-bottom:3px double #000;padding-bottom:12px;",
    "signature": "width:100%;margin-top:64px;text-align:center;font-size:13px;",
    "name": "font-weight:bold;text-decoration:underline;text-transform:uppercase;padding-top:80px;",
}


class DocumentRow(BaseModel):
    label: str
    value: str = ""
    items: List[str] = []


class MeetingBlock(BaseModel):
    nomor: int
    praktik: str
    memahami: str
    mengaplikasi: str
    refleksi: str


class DocumentSection(BaseModel):
    nomor: int
    judul: str
    rows: List[DocumentRow] = []
    meetings: List[MeetingBlock] = []


class SignatureBlock(BaseModel):
    nama_sekolah: str
    nama_kepala_sekolah: str
    nip_kepala_sekolah: str
    nama_guru: str
    nip_guru: str
    tempat_tanggal: str


class RPMDocument(BaseModel):
    judul: str
    nama_sekolah: str
    sections: List[DocumentSection]
    signature: SignatureBlock


def _identitas(form: FormData) -> DocumentSection:
    return DocumentSection(nomor=1, judul="IDENTITAS", rows=[
        DocumentRow(label="Nama Satuan Pendidikan", value=form.nama_sekolah),
        DocumentRow(label="Mata Pelajaran", value=form.mapel),
        DocumentRow(label="Kelas / Semester", value=f"{form.kelas} / {form.semester.value}"),
        DocumentRow(label="Durasi / Pertemuan", value=f"{form.durasi} ({form.jumlah_pertemuan} Pertemuan)"),
    ])


def _identifikasi(form: FormData, rpm: GeneratedRPM) -> DocumentSection:
    ident = rpm.identifikasi
    dimensi = DIMENSION_SEPARATOR.join(dim.value for dim in ordered_dimensions(form.dimensi))

    if isinstance(rpm, GeneratedRPMMendalam):
        murid, materi = ident.murid, ident.materi
        rows = [
            DocumentRow(label="Profil Murid", value=murid.profil_umum),
            DocumentRow(label="Kesiapan Belajar", value=murid.kesiapan_belajar),
            DocumentRow(label="Minat Murid", value=murid.minat),
            DocumentRow(label="Gaya Belajar", value=murid.gaya_belajar),
            DocumentRow(label="Materi Pelajaran", value=form.materi),
            DocumentRow(label="Jenis Pengetahuan", value=materi.jenis_pengetahuan),
            DocumentRow(label="Relevansi", value=materi.relevansi),
            DocumentRow(label="Tingkat Kesulitan", value=materi.tingkat_kesulitan),
            DocumentRow(label="Integrasi Nilai", value=materi.integrasi_nilai),
        ]
    else:
        rows = [
            DocumentRow(label="Siswa", value=ident.siswa),
            DocumentRow(label="Materi Pelajaran", value=form.materi),
        ]
    rows += [
        DocumentRow(label="Lintas Disiplin Ilmu", value=ident.lintas_disiplin),
        DocumentRow(label="Capaian Dimensi Lulusan", value=dimensi),
    ]
    return DocumentSection(nomor=2, judul="IDENTIFIKASI", rows=rows)


def _desain(form: FormData, rpm: GeneratedRPM) -> DocumentSection:
    ident = rpm.identifikasi
    if isinstance(rpm, GeneratedRPMMendalam):
        tp = ident.tujuan_pembelajaran_solo
    else:
        tp = form.tp
    praktik = [f"Pertemuan {i}: {p.value}" for i, p in enumerate(form.praktik_pedagogis, start=1)]
    return DocumentSection(nomor=3, judul="DESAIN PEMBELAJARAN", rows=[
        DocumentRow(label="Capaian Pembelajaran (CP)", value=form.cp),
        DocumentRow(label="Tujuan Pembelajaran (TP)", value=tp),
        DocumentRow(label="Topik Pembelajaran", value=ident.topik),
        DocumentRow(label="Praktik Pedagogis", items=praktik),
        DocumentRow(label="Kemitraan Pembelajaran", value=ident.kemitraan),
        DocumentRow(label="Lingkungan Pembelajaran", value=ident.lingkungan),
        DocumentRow(label="Pemanfaatan Teknologi Digital", value=ident.pemanfaatan_digital),
    ])


def _pengalaman(form: FormData, rpm: GeneratedRPM) -> DocumentSection:
    meetings = [
        MeetingBlock(
            nomor=idx + 1,
            praktik=form.praktik_pedagogis[idx].value,
            memahami=meet.memahami,
            mengaplikasi=meet.mengaplikasi,
            refleksi=meet.refleksi,
        )
        for idx, meet in enumerate(rpm.meetings)
    ]
    return DocumentSection(nomor=4, judul="PENGALAMAN BELAJAR", meetings=meetings)


def _asesmen(rpm: GeneratedRPM) -> DocumentSection:
    asesmen = rpm.asesmen
    return DocumentSection(nomor=5, judul="ASESMEN PEMBELAJARAN", rows=[
        DocumentRow(label="Asesmen Awal (Diagnostik)", value=asesmen.awal),
        DocumentRow(label="Asesmen Proses (Formatif)", value=asesmen.proses),
        DocumentRow(label="Asesmen Akhir (Sumatif)", value=asesmen.akhir),
    ])


def render_document(
    form: FormData,
    rpm: GeneratedRPM,
    today: Optional[date] = None,
    city: str = "Cikarang",
) -> RPMDocument:
    """
    Project a form and its generated RPM into the five-section document.

    `today` defaults to the current date in Asia/Jakarta; everything else is a
    pure function of the inputs.
    """
    today = today or get_jakarta_time().date()
    return RPMDocument(
        judul=DOCUMENT_TITLE,
        nama_sekolah=form.nama_sekolah,
        sections=[
            _identitas(form),
            _identifikasi(form, rpm),
            _desain(form, rpm),
            _pengalaman(form, rpm),
            _asesmen(rpm),
        ],
        signature=SignatureBlock(
            nama_sekolah=form.nama_sekolah,
            nama_kepala_sekolah=form.nama_kepala_sekolah,
            nip_kepala_sekolah=form.nip_kepala_sekolah,
            nama_guru=form.nama_guru,
            nip_guru=form.nip_guru,
            tempat_tanggal=f"{city}, {format_tanggal(today)}",
        ),
    )


# --- Serialisation ---

_env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=True)


def render_template(name: str, **context) -> str:
    return _env.get_template(name).render(**context)


def to_html(document: RPMDocument, inline_styles: bool = False) -> str:
    return render_template(
        "rpm_document.html.j2",
        doc=document,
        styles=INLINE_STYLES if inline_styles else {},
    )


def to_text(document: RPMDocument) -> str:
    lines = [document.judul.upper(), document.nama_sekolah.upper(), ""]
    for section in document.sections:
        lines.append(f"{section.nomor}. {section.judul}")
        for row in section.rows:
            if row.items:
                lines.append(f"{row.label}:")
                lines.extend(f"  - {item}" for item in row.items)
            else:
                lines.append(f"{row.label}: {row.value}")
        for meeting in section.meetings:
            lines.append(f"Pertemuan {meeting.nomor} - {meeting.praktik}")
            lines.append(f"  Memahami (Kegiatan Awal): {meeting.memahami}")
            lines.append(f"  Mengaplikasi (Kegiatan Inti): {meeting.mengaplikasi}")
            lines.append(f"  Refleksi (Kegiatan Penutup): {meeting.refleksi}")
        lines.append("")

    sig = document.signature
    lines += [
        f"Mengetahui, Kepala {sig.nama_sekolah}: {sig.nama_kepala_sekolah} (NIP. {sig.nip_kepala_sekolah})",
        f"{sig.tempat_tanggal}, Guru Mata Pelajaran: {sig.nama_guru} (NIP. {sig.nip_guru})",
    ]
    return "\n".join(lines)
