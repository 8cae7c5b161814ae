from datetime import date

from app.schemas.rpm_schema import GeneratedRPM, GeneratedRPMMendalam, GraduateDimension
from app.services.document_renderer import render_document, to_html, to_text
from app.utils.time_utils import format_tanggal

TODAY = date(2026, 10, 19)


def _render(form, payload):
    return render_document(form, GeneratedRPM.model_validate(payload), today=TODAY)


def _rows(section):
    return {row.label: row for row in section.rows}


def test_five_sections_in_fixed_order(filled_form, rpm_payload):
    document = _render(filled_form, rpm_payload(2))
    assert [s.judul for s in document.sections] == [
        "IDENTITAS",
        "IDENTIFIKASI",
        "DESAIN PEMBELAJARAN",
        "PENGALAMAN BELAJAR",
        "ASESMEN PEMBELAJARAN",
    ]
    assert [s.nomor for s in document.sections] == [1, 2, 3, 4, 5]


def test_one_block_per_meeting_with_practice(filled_form, rpm_payload):
    document = _render(filled_form, rpm_payload(2))
    meetings = document.sections[3].meetings

    assert len(meetings) == 2
    assert [m.praktik for m in meetings] == ["PjBL", "Game Based Learning"]
    assert meetings[1].memahami == "Apersepsi pertemuan 2"
    assert meetings[1].mengaplikasi == "Kegiatan inti pertemuan 2"
    assert meetings[1].refleksi == "Refleksi pertemuan 2"


def test_identity_and_assessment_rows(filled_form, rpm_payload):
    document = _render(filled_form, rpm_payload(2))

    identitas = _rows(document.sections[0])
    assert identitas["Kelas / Semester"].value == "7 / Ganjil"
    assert identitas["Durasi / Pertemuan"].value == "2 JP @40 Menit (2 Pertemuan)"

    asesmen = _rows(document.sections[4])
    assert asesmen["Asesmen Awal (Diagnostik)"].value == "Kuis diagnostik singkat"
    assert asesmen["Asesmen Akhir (Sumatif)"].value == "Tes tertulis"


def test_dimensions_use_enum_order_and_separator(filled_form, rpm_payload):
    filled_form.dimensi = [GraduateDimension.KOMUNIKASI, GraduateDimension.KEWARGAAN]
    document = _render(filled_form, rpm_payload(2))
    assert _rows(document.sections[1])["Capaian Dimensi Lulusan"].value == "Kewargaan, Komunikasi"


def test_design_section_lists_practices(filled_form, rpm_payload):
    design = _rows(_render(filled_form, rpm_payload(2)).sections[2])
    assert design["Praktik Pedagogis"].items == ["Pertemuan 1: PjBL", "Pertemuan 2: Game Based Learning"]
    assert design["Tujuan Pembelajaran (TP)"].value == filled_form.tp
    assert design["Pemanfaatan Teknologi Digital"].value == "Canva, Quizizz, Padlet"


def test_mendalam_document_uses_nested_fields(filled_form, mendalam_payload):
    rpm = GeneratedRPMMendalam.model_validate(mendalam_payload(2))
    document = render_document(filled_form, rpm, today=TODAY)

    identifikasi = _rows(document.sections[1])
    assert identifikasi["Gaya Belajar"].value == "Visual dan kinestetik."
    assert identifikasi["Integrasi Nilai"].value == "Kejujuran dan kerja sama"
    assert "Siswa" not in identifikasi
    design = _rows(document.sections[2])
    assert "(Relasional)" in design["Tujuan Pembelajaran (TP)"].value


def test_signature_block(filled_form, rpm_payload):
    signature = _render(filled_form, rpm_payload(2)).signature
    assert signature.tempat_tanggal == "Cikarang, 19 Oktober 2026"
    assert signature.nama_kepala_sekolah == "Budi Santoso"
    assert signature.nip_guru == "198001012005012001"


def test_rendering_is_deterministic(filled_form, rpm_payload):
    first = _render(filled_form, rpm_payload(2))
    second = _render(filled_form, rpm_payload(2))
    assert first == second
    assert to_html(first) == to_html(second)
    assert to_text(first) == to_text(second)


def test_html_escapes_service_text(filled_form, rpm_payload):
    payload = rpm_payload(2)
    payload["identifikasi"]["topik"] = "<script>alert(1)</script>"
    html = to_html(_render(filled_form, payload))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_inline_styles_only_for_clipboard(filled_form, rpm_payload):
    document = _render(filled_form, rpm_payload(2))
    assert "style=" not in to_html(document)
    assert 'style="width:100%;border-collapse:collapse' in to_html(document, inline_styles=True)


def test_text_rendering(filled_form, rpm_payload):
    text = to_text(_render(filled_form, rpm_payload(2)))
    assert text.startswith("PERENCANAAN PEMBELAJARAN MENDALAM (RPM)")
    assert "Pertemuan 2 - Game Based Learning" in text
    assert "4. PENGALAMAN BELAJAR" in text


def test_format_tanggal():
    assert format_tanggal(date(2025, 1, 5)) == "5 Januari 2025"
    assert format_tanggal(date(2025, 12, 31)) == "31 Desember 2025"
