from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EducationLevel(str, Enum):
    SD = "SD"
    SMP = "SMP"
    SMA = "SMA"
    SMK = "SMK"


class Semester(str, Enum):
    GANJIL = "Ganjil"
    GENAP = "Genap"


class PedagogicalPractice(str, Enum):
    INKUIRI = "Inkuiri-Discovery Learning"
    PJBL = "PjBL"
    PBL = "Problem Based Learning"
    GBL = "Game Based Learning"
    STATION = "Station Learning"


class GraduateDimension(str, Enum):
    KEIMANAN = "Keimanan & Ketakwaan"
    KEWARGAAN = "Kewargaan"
    PENALARAN_KRITIS = "Penalaran Kritis"
    KREATIVITAS = "Kreativitas"
    KOLABORASI = "Kolaborasi"
    KEMANDIRIAN = "Kemandirian"
    KESEHATAN = "Kesehatan"
    KOMUNIKASI = "Komunikasi"


class RPMVariant(str, Enum):
    STANDAR = "standar"
    MENDALAM = "mendalam"


DEFAULT_PRACTICE = list(PedagogicalPractice)[0]

# Kelas otomatis saat jenjang diganti
DEFAULT_GRADE: Dict[EducationLevel, str] = {
    EducationLevel.SD: "1",
    EducationLevel.SMP: "7",
    EducationLevel.SMA: "10",
    EducationLevel.SMK: "10",
}

GRADE_OPTIONS: Dict[EducationLevel, List[str]] = {
    EducationLevel.SD: [str(k) for k in range(1, 7)],
    EducationLevel.SMP: [str(k) for k in range(7, 10)],
    EducationLevel.SMA: [str(k) for k in range(10, 13)],
    EducationLevel.SMK: [str(k) for k in range(10, 13)],
}


def resize_practices(practices: List[PedagogicalPractice], count: int) -> List[PedagogicalPractice]:
    """Truncate or pad to `count`, keeping existing selections by index."""
    kept = list(practices[:count])
    return kept + [DEFAULT_PRACTICE] * (count - len(kept))


def ordered_dimensions(dimensions) -> List[GraduateDimension]:
    selected = set(dimensions)
    return [dim for dim in GraduateDimension if dim in selected]


# --- Input ---

class FormData(BaseModel):
    # Identitas
    nama_sekolah: str = ""
    nama_guru: str = ""
    nip_guru: str = ""
    nama_kepala_sekolah: str = ""
    nip_kepala_sekolah: str = ""

    # Kurikulum
    jenjang: EducationLevel = EducationLevel.SD
    kelas: str = Field("1", examples=["10 TKJ"])
    semester: Semester = Semester.GANJIL
    mapel: str = Field("", examples=["Matematika"])
    materi: str = Field("", examples=["Pecahan Senilai"])
    cp: str = ""
    tp: str = ""
    durasi: str = Field("", examples=["2 JP @45 Menit"])

    # Pertemuan
    jumlah_pertemuan: int = Field(1, ge=1)
    praktik_pedagogis: List[PedagogicalPractice] = Field(default_factory=lambda: [DEFAULT_PRACTICE])
    dimensi: List[GraduateDimension] = Field(default_factory=list)

    @model_validator(mode="after")
    def _sync_meetings(self):
        if len(self.praktik_pedagogis) != self.jumlah_pertemuan:
            self.praktik_pedagogis = resize_practices(self.praktik_pedagogis, self.jumlah_pertemuan)
        if len(set(self.dimensi)) != len(self.dimensi):
            self.dimensi = list(dict.fromkeys(self.dimensi))
        return self


REQUIRED_TEXT_FIELDS = (
    "nama_sekolah",
    "nama_guru",
    "nip_guru",
    "nama_kepala_sekolah",
    "nip_kepala_sekolah",
    "kelas",
    "mapel",
    "materi",
    "cp",
    "tp",
    "durasi",
)


class FormPatch(BaseModel):
    """Partial update sent by the form on every input event."""

    model_config = ConfigDict(extra="forbid")

    nama_sekolah: Optional[str] = None
    nama_guru: Optional[str] = None
    nip_guru: Optional[str] = None
    nama_kepala_sekolah: Optional[str] = None
    nip_kepala_sekolah: Optional[str] = None
    jenjang: Optional[EducationLevel] = None
    kelas: Optional[str] = None
    semester: Optional[Semester] = None
    mapel: Optional[str] = None
    materi: Optional[str] = None
    cp: Optional[str] = None
    tp: Optional[str] = None
    durasi: Optional[str] = None
    jumlah_pertemuan: Optional[int] = None


class PracticeUpdate(BaseModel):
    practice: PedagogicalPractice


class DimensionToggle(BaseModel):
    dimension: GraduateDimension


# --- Output dari Gemini ---

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MeetingActivities(_WireModel):
    memahami: str
    mengaplikasi: str
    refleksi: str


class PengalamanBelajar(_WireModel):
    pertemuan: List[MeetingActivities]


class Asesmen(_WireModel):
    awal: str
    proses: str
    akhir: str


class Identifikasi(_WireModel):
    siswa: str
    lintas_disiplin: str = Field(alias="lintasDisiplin")
    kemitraan: str
    lingkungan: str
    pemanfaatan_digital: str = Field(alias="pemanfaatanDigital")
    topik: str


class ProfilMurid(_WireModel):
    profil_umum: str = Field(alias="profilUmum")
    kesiapan_belajar: str = Field(alias="kesiapanBelajar")
    minat: str
    gaya_belajar: str = Field(alias="gayaBelajar")


class AnalisisMateri(_WireModel):
    jenis_pengetahuan: str = Field(alias="jenisPengetahuan")
    relevansi: str
    tingkat_kesulitan: str = Field(alias="tingkatKesulitan")
    integrasi_nilai: str = Field(alias="integrasiNilai")


class IdentifikasiMendalam(_WireModel):
    murid: ProfilMurid
    materi: AnalisisMateri
    lintas_disiplin: str = Field(alias="lintasDisiplin")
    kemitraan: str
    lingkungan: str
    pemanfaatan_digital: str = Field(alias="pemanfaatanDigital")
    topik: str
    tujuan_pembelajaran_solo: str = Field(alias="tujuanPembelajaranSolo")


class GeneratedRPM(_WireModel):
    identifikasi: Identifikasi
    pengalaman_belajar: PengalamanBelajar = Field(alias="pengalamanBelajar")
    asesmen: Asesmen

    @property
    def meetings(self) -> List[MeetingActivities]:
        return self.pengalaman_belajar.pertemuan


class GeneratedRPMMendalam(GeneratedRPM):
    identifikasi: IdentifikasiMendalam


RPM_MODELS = {
    RPMVariant.STANDAR: GeneratedRPM,
    RPMVariant.MENDALAM: GeneratedRPMMendalam,
}


# --- API ---

class FormView(BaseModel):
    status: str
    variant: RPMVariant
    form: FormData
    result: Optional[Dict[str, Any]] = None
    can_submit: bool
    missing_fields: List[str] = []
    scroll_to_output: bool = False
    scroll_delay_ms: int = 0


class FormOptions(BaseModel):
    jenjang: List[EducationLevel]
    semester: List[Semester]
    praktik_pedagogis: List[PedagogicalPractice]
    dimensi: List[GraduateDimension]
    kelas_default: Dict[str, str]
    kelas_pilihan: Dict[str, List[str]]
    max_pertemuan: Optional[int]
    variant: RPMVariant


class ClipboardExportRequest(BaseModel):
    # Kemampuan browser: navigator.clipboard.write dan document.execCommand("copy")
    clipboard_api: bool = True
    exec_command: bool = True
