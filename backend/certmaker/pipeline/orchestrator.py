"""
CertMaker — Certificate generation orchestrator.

Runs the full generation pipeline as a state machine:

  RECEIVED → VALIDATED → ID_MINTED → RENDERED → SECURED
  → CONVERTED → PERSISTED → CHECKSUMMED → DELIVERED

Stages run strictly in order and none can be skipped; a disabled security
sub-stage is a no-op, never an error. Any failure aborts the run. Validation
failures propagate unchanged, everything else surfaces as GenerationError.
Each step is timed, logged, and recorded in the GenerationResult.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from PIL import Image

from certmaker.artifact.verify import CertificateVerifier, compute_checksum
from certmaker.core.config import settings
from certmaker.errors import CertMakerError, GenerationError, ValidationError
from certmaker.models.config import (
    LayoutConfig,
    OutputConfig,
    SecurityConfig,
    StyleConfig,
)
from certmaker.models.records import AchievementRecord, PersonRecord
from certmaker.models.result import (
    CertificateInfo,
    GenerationOutcome,
    GenerationResult,
    PipelineState,
    StepTiming,
)
from certmaker.pipeline.convert import convert_to_output_format
from certmaker.pipeline.ids import IdMinter
from certmaker.pipeline.persist import write_artifact
from certmaker.pipeline.security import apply_security_measures
from certmaker.render.templates import CertificateTemplate
from certmaker.templates.registry import TEMPLATES
from certmaker.utils.logging import logger
from certmaker.utils.validate import (
    validate_certificate_id,
    validate_output_file_name,
    validate_records,
)

GENERATOR_VERSION = "CertMaker v1.0"


class PipelineContext:
    """Mutable per-call state passed through pipeline steps."""

    def __init__(
        self,
        person: PersonRecord,
        achievement: AchievementRecord,
        certificate_id: str | None = None,
        logo_path: str | None = None,
        output_file_name: str | None = None,
    ):
        self.person = person
        self.achievement = achievement
        self.certificate_id = certificate_id
        self.logo_path = logo_path
        self.output_file_name = output_file_name
        self.state = PipelineState.RECEIVED
        self.raster: Image.Image | None = None
        self.signature: str | None = None
        self.encoded: bytes = b""
        self.file_path: Path | None = None
        self.file_size: int = 0
        self.checksum: str = ""
        self.timings: list[StepTiming] = []


class CertificateGenerator:
    """
    Validates, renders, secures, converts and persists certificates.

    A generator and its configuration are immutable; each ``generate`` call
    keeps its state in its own PipelineContext, so one generator can serve
    several threads.
    """

    def __init__(
        self,
        template: CertificateTemplate,
        output_config: OutputConfig | None = None,
        security_config: SecurityConfig | None = None,
        minter: IdMinter | None = None,
    ):
        self.template = template
        self.output_config = output_config or OutputConfig()
        self.security_config = security_config or SecurityConfig()
        self.minter = minter or IdMinter()
        self.verifier = CertificateVerifier()

        problems = self.output_config.problems()
        if problems:
            raise ValidationError("Invalid output configuration", problems)

        self._render_template = (
            template if self.security_config.enable_watermark else template.without_watermark()
        )

    # -- public API ---------------------------------------------------------

    def generate(
        self,
        person: PersonRecord,
        achievement: AchievementRecord,
        certificate_id: str | None = None,
        logo_path: str | None = None,
        output_file_name: str | None = None,
    ) -> GenerationResult:
        """Execute the full pipeline. Returns a complete GenerationResult."""
        ctx = PipelineContext(person, achievement, certificate_id, logo_path, output_file_name)
        logger.info("=" * 60)
        logger.info(
            "Pipeline starting (template=%s, format=%s, dpi=%d)",
            self.template.template_name, self.output_config.format, self.output_config.dpi,
        )
        logger.info("=" * 60)
        pipeline_start = time.perf_counter()

        try:
            self._step_validate(ctx)
            self._step_mint_id(ctx)
            self._step_render(ctx)
            self._step_secure(ctx)
            self._step_convert(ctx)
            self._step_persist(ctx)
            self._step_checksum(ctx)
            result = self._step_assemble(ctx)
        except CertMakerError:
            logger.error("  ✗ Pipeline failed after state %s", ctx.state.value)
            ctx.state = PipelineState.FAILED
            raise
        except Exception as exc:
            logger.error("  ✗ Pipeline failed after state %s: %s", ctx.state.value, exc)
            ctx.state = PipelineState.FAILED
            raise GenerationError(f"Failed to generate certificate: {exc}", exc) from exc

        total_ms = int((time.perf_counter() - pipeline_start) * 1000)
        logger.info("=" * 60)
        logger.info(
            "[%s] Pipeline complete — %d bytes, %dms",
            result.certificate_id, result.file_size, total_ms,
        )
        logger.info("=" * 60)
        return result

    def try_generate(
        self,
        person: PersonRecord,
        achievement: AchievementRecord,
        certificate_id: str | None = None,
        logo_path: str | None = None,
        output_file_name: str | None = None,
    ) -> GenerationOutcome:
        """Like ``generate`` but returns the error instead of raising it."""
        try:
            result = self.generate(person, achievement, certificate_id, logo_path, output_file_name)
        except CertMakerError as exc:
            return GenerationOutcome(error=exc)
        return GenerationOutcome(result=result)

    async def agenerate(
        self,
        person: PersonRecord,
        achievement: AchievementRecord,
        certificate_id: str | None = None,
        logo_path: str | None = None,
        output_file_name: str | None = None,
    ) -> GenerationResult:
        """Run ``generate`` on a worker thread. There is no cancellation; a
        caller that times out may still find the file written."""
        return await asyncio.to_thread(
            self.generate, person, achievement, certificate_id, logo_path, output_file_name
        )

    def verify_certificate(self, file_path: str | Path, expected_checksum: str) -> bool:
        return self.verifier.verify(file_path, expected_checksum)

    def get_certificate_info(self, file_path: str | Path) -> CertificateInfo | None:
        return self.verifier.inspect(file_path)

    # -- steps --------------------------------------------------------------

    def _record_step(
        self, ctx: PipelineContext, name: str, start: float, status: str = "ok", detail: str = ""
    ) -> None:
        ms = int((time.perf_counter() - start) * 1000)
        ctx.timings.append(StepTiming(step=name, duration_ms=ms, status=status, detail=detail))
        symbol = "✓" if status == "ok" else ("⊘" if status == "skipped" else "✗")
        logger.info("  %s %s — %dms %s", symbol, name, ms, detail)

    def _step_validate(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        try:
            validate_records(ctx.person, ctx.achievement)
            if ctx.output_file_name is not None:
                validate_output_file_name(ctx.output_file_name)
        except ValidationError as exc:
            self._record_step(ctx, "validate", t, "failed", ", ".join(exc.field_errors))
            raise
        ctx.state = PipelineState.VALIDATED
        self._record_step(ctx, "validate", t)

    def _step_mint_id(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        supplied = ctx.certificate_id is not None
        if not supplied:
            ctx.certificate_id = self.minter.mint(ctx.person, ctx.achievement)
        try:
            validate_certificate_id(ctx.certificate_id)
        except ValidationError:
            self._record_step(ctx, "mint_id", t, "failed", "invalid certificate id")
            raise
        ctx.state = PipelineState.ID_MINTED
        self._record_step(
            ctx, "mint_id", t, detail=f"{ctx.certificate_id} ({'supplied' if supplied else 'minted'})"
        )

    def _step_render(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        ctx.raster = self._render_template.render(
            person=ctx.person,
            achievement=ctx.achievement,
            certificate_id=ctx.certificate_id,
            logo_path=ctx.logo_path,
        )
        ctx.state = PipelineState.RENDERED
        self._record_step(ctx, "render", t, detail=f"{ctx.raster.width}x{ctx.raster.height}")

    def _step_secure(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        secured = apply_security_measures(
            ctx.raster,
            ctx.certificate_id,
            ctx.person,
            ctx.achievement,
            self.security_config,
            fallback_secret=settings.secret_key,
        )
        ctx.raster = secured.image
        ctx.signature = secured.signature
        ctx.state = PipelineState.SECURED
        if secured.applied:
            self._record_step(ctx, "secure", t, detail=", ".join(secured.applied))
        else:
            self._record_step(ctx, "secure", t, "skipped", "all measures disabled")

    def _step_convert(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        ctx.encoded = convert_to_output_format(ctx.raster, self.template.layout, self.output_config)
        ctx.raster = None
        ctx.state = PipelineState.CONVERTED
        self._record_step(
            ctx, "convert", t,
            detail=f"{self.output_config.format} @ {self.output_config.dpi} dpi → {len(ctx.encoded)} bytes",
        )

    def _step_persist(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        ctx.file_path = write_artifact(
            ctx.encoded,
            ctx.certificate_id,
            self.output_config.format,
            output_directory=self.output_config.output_directory,
            custom_name=ctx.output_file_name,
        )
        ctx.file_size = ctx.file_path.stat().st_size
        ctx.state = PipelineState.PERSISTED
        self._record_step(ctx, "persist", t, detail=ctx.file_path.name)

    def _step_checksum(self, ctx: PipelineContext) -> None:
        t = time.perf_counter()
        ctx.checksum = compute_checksum(ctx.encoded)
        ctx.state = PipelineState.CHECKSUMMED
        self._record_step(ctx, "checksum", t, detail=ctx.checksum[:12])

    def _step_assemble(self, ctx: PipelineContext) -> GenerationResult:
        t = time.perf_counter()
        generated_at = datetime.now(timezone.utc)
        metadata = self._create_metadata(ctx, generated_at)
        ctx.state = PipelineState.DELIVERED
        self._record_step(ctx, "assemble_metadata", t)
        return GenerationResult(
            certificate_id=ctx.certificate_id,
            file_path=str(ctx.file_path),
            file_size=ctx.file_size,
            generated_at=generated_at,
            checksum=ctx.checksum,
            metadata=metadata,
            timings=ctx.timings,
        )

    def _create_metadata(self, ctx: PipelineContext, generated_at: datetime) -> dict[str, Any]:
        return {
            "certificate_id": ctx.certificate_id,
            "template": self.template.template_name,
            "person": ctx.person.to_dict(),
            "achievement": ctx.achievement.to_dict(),
            "output_config": {
                "dpi": self.output_config.dpi,
                "quality": self.output_config.quality,
                "format": self.output_config.format,
            },
            "security_features": {
                "watermark": self.security_config.enable_watermark,
                "digital_signature": self.security_config.enable_digital_signature,
                "metadata": self.security_config.embed_metadata,
                "qr_code": self.security_config.enable_qr_code,
            },
            "generated_by": GENERATOR_VERSION,
            "generated_at": generated_at.isoformat(),
        }


class GeneratorFactory:
    """Preconfigured generators for the shipped templates."""

    @staticmethod
    def create_standard(
        style: StyleConfig | None = None,
        layout: LayoutConfig | None = None,
        output_config: OutputConfig | None = None,
        security_config: SecurityConfig | None = None,
    ) -> CertificateGenerator:
        return CertificateGenerator(
            template=TEMPLATES["standard"].build(style=style, layout=layout),
            output_config=output_config,
            security_config=security_config,
        )

    @staticmethod
    def create_elegant(
        style: StyleConfig | None = None,
        layout: LayoutConfig | None = None,
        output_config: OutputConfig | None = None,
        security_config: SecurityConfig | None = None,
    ) -> CertificateGenerator:
        return CertificateGenerator(
            template=TEMPLATES["elegant"].build(style=style, layout=layout),
            output_config=output_config,
            security_config=security_config,
        )

    @staticmethod
    def create_high_quality(
        template: CertificateTemplate | None = None,
        security_config: SecurityConfig | None = None,
    ) -> CertificateGenerator:
        return CertificateGenerator(
            template=template or TEMPLATES["standard"].build(),
            output_config=OutputConfig(dpi=600, quality=100, format="jpg"),
            security_config=security_config or SecurityConfig(
                enable_watermark=True,
                enable_digital_signature=True,
                embed_metadata=True,
                enable_qr_code=True,
            ),
        )
