from typing import List, Optional

GENERATION_FAILED_MESSAGE = "Terjadi kesalahan saat membuat RPM. Silakan coba lagi."
NETWORK_FAILED_MESSAGE = "Gagal terhubung ke layanan AI. Periksa koneksi internet Anda lalu coba lagi."
MALFORMED_RESPONSE_MESSAGE = "Respons AI tidak sesuai format RPM. Silakan coba lagi."


class RPMError(Exception):
    """Base error. `user_message` is what the user (guru) gets to see."""

    user_message = GENERATION_FAILED_MESSAGE

    def __init__(self, message: str = "", user_message: Optional[str] = None):
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


class GenerationError(RPMError):
    pass


class TransportError(GenerationError):
    """Network failure, missing credential or non-2xx answer from Gemini."""


class MalformedResponseError(GenerationError):
    """Gemini answered, but the payload is not a valid RPM."""

    user_message = MALFORMED_RESPONSE_MESSAGE


class SubmissionBlocked(RPMError):
    user_message = "Lengkapi semua isian wajib dan pilih minimal satu dimensi kelulusan."

    def __init__(self, missing: List[str]):
        super().__init__(f"Form belum lengkap: {', '.join(missing)}")
        self.missing = missing


class GenerationInProgress(RPMError):
    user_message = "RPM sedang diproses. Mohon tunggu."


class ClipboardUnavailable(Exception):
    pass


class InvalidFieldError(RPMError, ValueError):
    """A form patch names a field or value the form does not accept."""

    user_message = "Isian form tidak valid."
