from google.genai import types

from app.prompts.rpm_prompt import ANCHORS, build_output_schema, build_rpm_request
from app.schemas.rpm_schema import GraduateDimension, RPMVariant


def test_instruction_contains_form_fields(filled_form):
    text = build_rpm_request(filled_form).instruction_text

    assert "konsultan pendidikan ahli Kurikulum Merdeka" in text
    for value in (filled_form.nama_sekolah, filled_form.mapel, filled_form.materi, filled_form.cp, filled_form.tp):
        assert value in text
    assert "Jenjang: SMP - Kelas: 7" in text
    assert "Jumlah Pertemuan: 2" in text
    assert "Pertemuan 1: PjBL; Pertemuan 2: Game Based Learning" in text
    assert text.count(ANCHORS) == 3
    assert "Canva, Quizizz, Padlet" in text


def test_dimensions_follow_enum_order(filled_form):
    filled_form.dimensi = [GraduateDimension.KOMUNIKASI, GraduateDimension.KEIMANAN]
    text = build_rpm_request(filled_form).instruction_text
    assert "Dimensi Lulusan: Keimanan & Ketakwaan, Komunikasi" in text


def test_standard_variant_has_no_solo_rules(filled_form):
    text = build_rpm_request(filled_form, RPMVariant.STANDAR).instruction_text
    assert "SOLO" not in text
    assert "Identifikasi Siswa" in text


def test_mendalam_variant_adds_solo_and_terminology(filled_form):
    text = build_rpm_request(filled_form, RPMVariant.MENDALAM).instruction_text
    assert "Taksonomi SOLO" in text
    assert "WAJIB memuat level Relasional dan Abstrak Diperluas" in text
    assert 'Gunakan istilah "murid" sebagai pengganti "siswa"' in text
    assert "Identifikasi Murid" in text


def test_standard_schema_requires_every_block():
    schema = build_output_schema(RPMVariant.STANDAR)

    assert schema.type == types.Type.OBJECT
    assert schema.required == ["identifikasi", "pengalamanBelajar", "asesmen"]
    ident = schema.properties["identifikasi"]
    assert set(ident.required) == {"siswa", "lintasDisiplin", "kemitraan", "lingkungan", "pemanfaatanDigital", "topik"}
    pertemuan = schema.properties["pengalamanBelajar"].properties["pertemuan"]
    assert pertemuan.type == types.Type.ARRAY
    assert pertemuan.items.required == ["memahami", "mengaplikasi", "refleksi"]
    assert schema.properties["asesmen"].required == ["awal", "proses", "akhir"]


def test_mendalam_schema_nests_learner_and_material():
    ident = build_output_schema(RPMVariant.MENDALAM).properties["identifikasi"]

    assert "siswa" not in ident.properties
    assert ident.properties["murid"].required == ["profilUmum", "kesiapanBelajar", "minat", "gayaBelajar"]
    assert ident.properties["materi"].required == ["jenisPengetahuan", "relevansi", "tingkatKesulitan", "integrasiNilai"]
    assert "tujuanPembelajaranSolo" in ident.required
