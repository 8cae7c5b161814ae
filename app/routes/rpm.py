import re
import uuid
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import HTMLResponse

from app.config import Config
from app.schemas.rpm_schema import (
    DEFAULT_GRADE,
    GRADE_OPTIONS,
    ClipboardExportRequest,
    DimensionToggle,
    EducationLevel,
    FormOptions,
    FormPatch,
    FormView,
    GraduateDimension,
    PedagogicalPractice,
    PracticeUpdate,
    RPMVariant,
    Semester,
)
from app.services.document_renderer import RPMDocument, render_document, to_html
from app.services.export_service import (
    BrowserClipboard,
    ExportResult,
    build_clipboard_payload,
    build_docx,
    build_print_page,
    copy_document,
)
from app.services.form_controller import FormController, FormStore
from app.services.rpm_service import RpmService

router = APIRouter()


def _build_controller() -> FormController:
    variant = RPMVariant(Config.RPM_VARIANT)
    service = RpmService(variant=variant)
    return FormController(
        service.generate_rpm,
        max_meetings=Config.max_meetings(),
        clear_result_on_submit=Config.RPM_CLEAR_RESULT_ON_SUBMIT,
        variant=variant,
        scroll_delay_ms=Config.RPM_SCROLL_DELAY_MS,
    )


form_store = FormStore(
    _build_controller,
    ttl=Config.SESSION_MAX_AGE,
    maxsize=Config.RPM_MAX_SESSIONS,
)


def get_controller(request: Request) -> FormController:
    form_id = request.session.get("form_id")
    if not form_id:
        form_id = uuid.uuid4().hex
        request.session["form_id"] = form_id
    return form_store.get(form_id)


def _attachment(filename: str) -> str:
    # Header values must be latin-1, so the real name goes in filename*
    stem, _, ext = filename.rpartition(".")
    ascii_stem = re.sub(r"[^A-Za-z0-9_-]", "", stem).strip("_-") or "RPM"
    return f"attachment; filename=\"{ascii_stem}.{ext}\"; filename*=UTF-8''{quote(filename)}"


def _current_document(controller: FormController) -> RPMDocument:
    if controller.result is None:
        raise HTTPException(status_code=404, detail="Belum ada RPM. Silakan buat RPM terlebih dahulu.")
    return render_document(controller.result_form, controller.result, city=Config.RPM_SIGNATURE_CITY)


# --- Form ---

@router.get("/options", response_model=FormOptions)
async def get_options():
    return FormOptions(
        jenjang=list(EducationLevel),
        semester=list(Semester),
        praktik_pedagogis=list(PedagogicalPractice),
        dimensi=list(GraduateDimension),
        kelas_default={level.value: grade for level, grade in DEFAULT_GRADE.items()},
        kelas_pilihan={level.value: grades for level, grades in GRADE_OPTIONS.items()},
        max_pertemuan=Config.max_meetings(),
        variant=RPMVariant(Config.RPM_VARIANT),
    )


@router.get("/state", response_model=FormView)
async def get_state(controller: FormController = Depends(get_controller)):
    return controller.view()


@router.patch("/form", response_model=FormView)
async def update_form(patch: FormPatch, controller: FormController = Depends(get_controller)):
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    # Jenjang first so an explicit kelas in the same patch wins over the default
    if "jenjang" in changes:
        controller.set_level(changes.pop("jenjang"))
    controller.update_fields(changes)
    return controller.view()


@router.put("/form/meetings/{nomor}", response_model=FormView)
async def set_meeting_practice(
    nomor: int,
    body: PracticeUpdate,
    controller: FormController = Depends(get_controller),
):
    try:
        controller.set_practice(nomor - 1, body.practice)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return controller.view()


@router.post("/form/dimensions/toggle", response_model=FormView)
async def toggle_dimension(body: DimensionToggle, controller: FormController = Depends(get_controller)):
    controller.toggle_dimension(body.dimension)
    return controller.view()


# --- Generate ---

@router.post("/generate", response_model=FormView)
async def generate_rpm(controller: FormController = Depends(get_controller)):
    # Blocked / in-flight / failed submissions are mapped by the handlers in app.main
    await controller.submit()
    return controller.view()


# --- Document & Export ---

@router.get("/document", response_model=RPMDocument)
async def get_document(controller: FormController = Depends(get_controller)):
    return _current_document(controller)


@router.get("/document/html", response_class=HTMLResponse)
async def get_document_html(controller: FormController = Depends(get_controller)):
    return HTMLResponse(to_html(_current_document(controller)))


@router.get("/print", response_class=HTMLResponse)
async def print_document(controller: FormController = Depends(get_controller)):
    return HTMLResponse(build_print_page(_current_document(controller)))


@router.post("/export/clipboard", response_model=ExportResult)
async def export_clipboard(
    req: ClipboardExportRequest,
    controller: FormController = Depends(get_controller),
):
    document = _current_document(controller)
    writer = BrowserClipboard(clipboard_api=req.clipboard_api, exec_command=req.exec_command)
    return copy_document(
        build_clipboard_payload(document),
        writer,
        open_url=Config.RPM_EXPORT_URL,
        open_before_copy=Config.RPM_OPEN_EXPORT_BEFORE_COPY,
    )


@router.get("/export/word")
async def export_word(controller: FormController = Depends(get_controller)):
    document = _current_document(controller)
    file_stream = build_docx(document)

    safe_mapel = re.sub(r'[^\w\s-]', '', controller.result_form.mapel).strip().replace(" ", "_") or "Dokumen"
    return Response(
        content=file_stream.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        headers={
            "Content-Disposition": _attachment(f"RPM_{safe_mapel}.docx"),
            "Access-Control-Expose-Headers": "Content-Disposition",
        },
    )
