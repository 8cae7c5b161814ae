import logging

from pydantic import ValidationError

from app.errors import MalformedResponseError
from app.gemini_client import GeminiClient, gemini_client
from app.prompts.rpm_prompt import build_rpm_request
from app.schemas.rpm_schema import RPM_MODELS, FormData, GeneratedRPM, RPMVariant

logger = logging.getLogger(__name__)


class RpmService:
    def __init__(self, client: GeminiClient = None, variant: RPMVariant = RPMVariant.STANDAR):
        self.client = client or gemini_client
        self.variant = variant

    async def generate_rpm(self, form: FormData) -> GeneratedRPM:
        # 1. Build Prompt + Schema
        request = build_rpm_request(form, self.variant)

        # 2. Call AI
        logger.info(
            f"Generating RPM: mapel={form.mapel!r} pertemuan={form.jumlah_pertemuan} variant={self.variant.value}"
        )
        payload = await self.client.generate_json(request.instruction_text, request.output_schema)

        # 3. Validate before anything reaches the renderer
        return self.validate(payload, form)

    def validate(self, payload: dict, form: FormData) -> GeneratedRPM:
        model = RPM_MODELS[self.variant]
        try:
            rpm = model.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Gemini payload does not match the RPM schema: {e.error_count()} error(s)")
            raise MalformedResponseError(f"RPM schema mismatch: {e}") from e

        if len(rpm.meetings) != form.jumlah_pertemuan:
            raise MalformedResponseError(
                f"Expected {form.jumlah_pertemuan} pertemuan, got {len(rpm.meetings)}"
            )
        logger.info(f"RPM generated with {len(rpm.meetings)} pertemuan")
        return rpm
