from google.genai import types
from pydantic import BaseModel

from app.schemas.rpm_schema import FormData, RPMVariant, ordered_dimensions

ANCHORS = "Berkesadaran, Bermakna, Menggembirakan"


class RPMGenerationRequest(BaseModel):
    instruction_text: str
    output_schema: types.Schema


def _string() -> types.Schema:
    return types.Schema(type=types.Type.STRING)


def _object(**properties: types.Schema) -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties=properties,
        required=list(properties),
    )


def _common_parts():
    pengalaman = _object(
        pertemuan=types.Schema(
            type=types.Type.ARRAY,
            items=_object(memahami=_string(), mengaplikasi=_string(), refleksi=_string()),
        )
    )
    asesmen = _object(awal=_string(), proses=_string(), akhir=_string())
    return pengalaman, asesmen


def build_output_schema(variant: RPMVariant) -> types.Schema:
    pengalaman, asesmen = _common_parts()
    if variant == RPMVariant.MENDALAM:
        identifikasi = _object(
            murid=_object(
                profilUmum=_string(),
                kesiapanBelajar=_string(),
                minat=_string(),
                gayaBelajar=_string(),
            ),
            materi=_object(
                jenisPengetahuan=_string(),
                relevansi=_string(),
                tingkatKesulitan=_string(),
                integrasiNilai=_string(),
            ),
            lintasDisiplin=_string(),
            kemitraan=_string(),
            lingkungan=_string(),
            pemanfaatanDigital=_string(),
            topik=_string(),
            tujuanPembelajaranSolo=_string(),
        )
    else:
        identifikasi = _object(
            siswa=_string(),
            lintasDisiplin=_string(),
            kemitraan=_string(),
            lingkungan=_string(),
            pemanfaatanDigital=_string(),
            topik=_string(),
        )
    return _object(identifikasi=identifikasi, pengalamanBelajar=pengalaman, asesmen=asesmen)


def _meeting_plan(data: FormData) -> str:
    return "; ".join(
        f"Pertemuan {i}: {practice.value}"
        for i, practice in enumerate(data.praktik_pedagogis, start=1)
    )


def _requirements(data: FormData, variant: RPMVariant) -> str:
    if variant == RPMVariant.MENDALAM:
        items = [
            "Identifikasi Murid: Analisis murid secara otomatis sesuai jenjang dan materi, isi profilUmum, kesiapanBelajar, minat, dan gayaBelajar.",
            "Analisis Materi: Tentukan jenisPengetahuan, relevansi dengan kehidupan murid, tingkatKesulitan, dan integrasiNilai.",
        ]
    else:
        items = ["Identifikasi Siswa: Deskripsikan profil siswa yang relevan dengan jenjang dan materi secara otomatis."]

    items += [
        "Lintas Disiplin Ilmu: Tentukan mata pelajaran lain yang berkaitan.",
        "Kemitraan: Tentukan pihak luar atau sumber belajar yang sesuai.",
        "Lingkungan: Tentukan pengaturan kelas atau lokasi belajar.",
        "Digital: Berikan referensi tools online yang konkret (seperti Canva, Quizizz, Padlet, dll).",
        f"""Pengalaman Belajar: Buat TEPAT {data.jumlah_pertemuan} pertemuan secara berurutan. Setiap pertemuan harus sesuai dengan sintaks praktik pedagogis yang dipilih untuk pertemuan tersebut.
   - Memahami: Kegiatan awal ({ANCHORS}).
   - Mengaplikasi: Kegiatan inti mengikuti sintaks model pembelajaran ({ANCHORS}).
   - Refleksi: Kegiatan penutup ({ANCHORS}).""",
        "Asesmen: Detailkan asesmen awal (diagnostik), proses (formatif), dan akhir (sumatif) secara otomatis.",
    ]
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def _solo_instruction() -> str:
    return """
Aturan Tambahan:
- Rumuskan tujuanPembelajaranSolo dari Capaian Pembelajaran (CP) menggunakan Taksonomi SOLO (Unistruktural, Multistruktural, Relasional, Abstrak Diperluas).
- Tuliskan label level SOLO di setiap butir tujuan, misalnya "(Relasional)".
- WAJIB memuat level Relasional dan Abstrak Diperluas.
- Gunakan istilah "murid" sebagai pengganti "siswa" di seluruh output.
"""


def build_rpm_request(data: FormData, variant: RPMVariant = RPMVariant.STANDAR) -> RPMGenerationRequest:
    dimensi_str = ", ".join(dim.value for dim in ordered_dimensions(data.dimensi))
    extra = _solo_instruction() if variant == RPMVariant.MENDALAM else ""

    instruction = f"""
Bertindaklah sebagai konsultan pendidikan ahli Kurikulum Merdeka di Indonesia.
Buatkan konten Perencanaan Pembelajaran Mendalam (RPM) berdasarkan data berikut:

- Satuan Pendidikan: {data.nama_sekolah}
- Jenjang: {data.jenjang.value} - Kelas: {data.kelas}
- Semester: {data.semester.value}
- Mata Pelajaran: {data.mapel}
- Materi: {data.materi}
- Capaian Pembelajaran (CP): {data.cp}
- Tujuan Pembelajaran (TP): {data.tp}
- Dimensi Lulusan: {dimensi_str}
- Jumlah Pertemuan: {data.jumlah_pertemuan}
- Durasi per Pertemuan: {data.durasi}
- Praktik Pedagogis per Pertemuan: {_meeting_plan(data)}

Persyaratan Khusus:
{_requirements(data, variant)}
{extra}
Berikan output dalam format JSON murni sesuai schema.
"""
    return RPMGenerationRequest(
        instruction_text=instruction,
        output_schema=build_output_schema(variant),
    )
