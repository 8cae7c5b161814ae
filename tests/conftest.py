import pytest

from app.schemas.rpm_schema import (
    EducationLevel,
    FormData,
    GeneratedRPM,
    GraduateDimension,
    PedagogicalPractice,
)


def _meetings(count):
    return [
        {
            "memahami": f"Apersepsi pertemuan {i}",
            "mengaplikasi": f"Kegiatan inti pertemuan {i}",
            "refleksi": f"Refleksi pertemuan {i}",
        }
        for i in range(1, count + 1)
    ]


@pytest.fixture
def rpm_payload():
    def build(meetings=2):
        return {
            "identifikasi": {
                "siswa": "Siswa kelas 7 aktif dan senang berdiskusi.",
                "lintasDisiplin": "IPA, Bahasa Indonesia",
                "kemitraan": "Puskesmas setempat",
                "lingkungan": "Kelas dengan kelompok kecil",
                "pemanfaatanDigital": "Canva, Quizizz, Padlet",
                "topik": "Pecahan dalam Kehidupan Sehari-hari",
            },
            "pengalamanBelajar": {"pertemuan": _meetings(meetings)},
            "asesmen": {
                "awal": "Kuis diagnostik singkat",
                "proses": "Observasi diskusi kelompok",
                "akhir": "Tes tertulis",
            },
        }
    return build


@pytest.fixture
def mendalam_payload():
    def build(meetings=2):
        return {
            "identifikasi": {
                "murid": {
                    "profilUmum": "Murid kelas 10 yang antusias.",
                    "kesiapanBelajar": "Sudah memahami konsep dasar.",
                    "minat": "Teknologi dan permainan.",
                    "gayaBelajar": "Visual dan kinestetik.",
                },
                "materi": {
                    "jenisPengetahuan": "Konseptual dan prosedural",
                    "relevansi": "Dekat dengan kehidupan murid",
                    "tingkatKesulitan": "Sedang",
                    "integrasiNilai": "Kejujuran dan kerja sama",
                },
                "lintasDisiplin": "Fisika",
                "kemitraan": "Orang tua murid",
                "lingkungan": "Laboratorium komputer",
                "pemanfaatanDigital": "Padlet",
                "topik": "Algoritma",
                "tujuanPembelajaranSolo": "Murid mampu menghubungkan konsep (Relasional) dan merancang solusi baru (Abstrak Diperluas).",
            },
            "pengalamanBelajar": {"pertemuan": _meetings(meetings)},
            "asesmen": {"awal": "Asesmen awal", "proses": "Asesmen proses", "akhir": "Asesmen akhir"},
        }
    return build


@pytest.fixture
def filled_form():
    return FormData(
        nama_sekolah="SMP Negeri 1 Cikarang",
        nama_guru="Siti Aminah",
        nip_guru="198001012005012001",
        nama_kepala_sekolah="Budi Santoso",
        nip_kepala_sekolah="197501012000031001",
        jenjang=EducationLevel.SMP,
        kelas="7",
        mapel="Matematika",
        materi="Pecahan",
        cp="Peserta didik dapat membandingkan dan mengurutkan pecahan.",
        tp="Siswa dapat mengurutkan pecahan.",
        durasi="2 JP @40 Menit",
        jumlah_pertemuan=2,
        praktik_pedagogis=[PedagogicalPractice.PJBL, PedagogicalPractice.GBL],
        dimensi=[GraduateDimension.KOLABORASI, GraduateDimension.PENALARAN_KRITIS],
    )


class FakeGenerator:
    """Async stand-in for RpmService.generate_rpm."""

    def __init__(self, payload_factory=None, error=None):
        self.payload_factory = payload_factory
        self.error = error
        self.calls = []

    async def __call__(self, form):
        self.calls.append(form)
        if self.error is not None:
            raise self.error
        return GeneratedRPM.model_validate(self.payload_factory(form.jumlah_pertemuan))


@pytest.fixture
def fake_generator(rpm_payload):
    def build(error=None):
        return FakeGenerator(rpm_payload, error=error)
    return build
