"""Generation orchestrator: theme → content → (images ∥ header) → (main content ∥ footer)"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from theme_api.core.completion_client import CompletionClient
from theme_api.core.config import settings
from theme_api.core.photo_search import PexelsClient
from theme_api.core.state_machine import GenerationRun, GenerationStatus
from theme_api.core.structured_call import StructuredCaller
from theme_api.models.errors import (
    ApplicationError,
    DependencyNotReadyError,
    StepFailedError,
    UnknownStepError,
)
from theme_api.models.theme import ExampleContent, ExampleImages, Theme
from theme_api.steps.fallbacks import uses_default_images
from theme_api.steps.images import ImageSearchHelper
from theme_api.steps.registry import PIPELINE_STAGES, STEPS, THEME, StepSpec

logger = logging.getLogger(__name__)


@dataclass
class GenerationEvent:
    """Change notification delivered to subscribers"""
    run_id: int
    kind: str
    step: Optional[str]
    detail: str
    status: GenerationStatus


Listener = Callable[[GenerationEvent], None]


class GenerationOrchestrator:
    """
    Owns the authoritative GenerationRun and drives the six generation steps.

    Failure policy:
    - Model/network/parse failures are contained by the structured caller and
      replaced by each step's fallback. The step is recorded in
      ``run.degraded_steps`` so callers can offer a manual retry.
    - With ``strict=True`` a fallback is treated as a failure instead: the run
      moves to ERROR, ``failed_step`` is set, and dependent steps are not
      started. ``retry_step`` re-runs exactly the failed step.
    - Unexpected exceptions from a step always surface as ``StepFailedError``.

    Each ``generate`` call starts a new run id; results that arrive for a
    superseded run are dropped.
    """

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        photos: Optional[PexelsClient] = None,
        caller: Optional[StructuredCaller] = None,
        image_helper: Optional[ImageSearchHelper] = None,
        strict: Optional[bool] = None,
        evolve_theme: Optional[bool] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.caller = caller or StructuredCaller(client or CompletionClient(), sleep=sleep)
        self.image_helper = image_helper or ImageSearchHelper(self.caller, photos or PexelsClient())
        self.strict = settings.strict_steps if strict is None else strict
        self.evolve_theme = settings.evolve_theme if evolve_theme is None else evolve_theme
        self.run = GenerationRun()
        self._run_counter = 0
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def status(self) -> GenerationStatus:
        return self.run.status

    @property
    def failed_step(self) -> Optional[str]:
        return self.run.failed_step

    @property
    def theme(self) -> Optional[Theme]:
        return self.run.theme

    @property
    def content(self) -> Optional[ExampleContent]:
        return self.run.content

    @property
    def images(self) -> Optional[ExampleImages]:
        return self.run.images

    @property
    def fragments(self):
        return self.run.fragments

    def reserve_run_id(self) -> int:
        """Claim the id of a run that will be started later with ``generate(..., run_id=...)``"""
        self._run_counter += 1
        return self._run_counter

    def snapshot(self) -> Dict[str, Any]:
        return self.run.snapshot()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, run: GenerationRun, kind: str, detail: str, step: Optional[str] = None) -> None:
        run.log_event(kind, detail, step=step)
        event = GenerationEvent(run_id=run.run_id, kind=kind, step=step, detail=detail, status=run.status)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"[Orchestrator] Listener failed on event {kind}")

    def _is_current(self, run: GenerationRun) -> bool:
        return run is self.run

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def generate(
        self,
        prompt: str,
        evolve_theme: Optional[bool] = None,
        run_id: Optional[int] = None,
    ) -> GenerationRun:
        """
        Run the full pipeline for ``prompt``.

        Empty prompts are a no-op. Prior step outputs are discarded; the prior
        Theme is only kept as evolution context when ``evolve_theme`` is on.
        A ``run_id`` from ``reserve_run_id`` that a later run has already
        overtaken is not started.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            logger.info("[Orchestrator] Empty prompt, nothing to generate")
            return self.run

        evolve = self.evolve_theme if evolve_theme is None else evolve_theme
        previous_theme = self.run.theme if evolve else None

        if run_id is None:
            run_id = self.reserve_run_id()
        elif run_id <= self.run.run_id:
            logger.info(f"[Orchestrator] Run {run_id} already superseded by run {self.run.run_id}, not starting")
            return self.run

        run = GenerationRun(prompt=prompt, run_id=run_id, previous_theme=previous_theme)
        self.run = run
        run.status = GenerationStatus.RUNNING
        logger.info(
            f"[Orchestrator] Starting generation | run_id: {run.run_id} | "
            f"evolving_theme: {previous_theme is not None} | strict: {self.strict}"
        )
        self._emit(run, "started", f"Generating theme for: {prompt}")

        for stage in PIPELINE_STAGES:
            if not self._is_current(run):
                logger.info(f"[Orchestrator] Run {run.run_id} superseded, stopping")
                return run

            results = await asyncio.gather(
                *(self._execute(run, name) for name in stage),
                return_exceptions=True,
            )

            failures = []
            for name, result in zip(stage, results):
                if isinstance(result, Exception):
                    failures.append((name, result))
                elif isinstance(result, BaseException):
                    raise result

            if failures:
                if self._is_current(run):
                    name, error = failures[0]
                    self._fail(run, name, error)
                return run

        if self._is_current(run):
            run.status = GenerationStatus.IDLE
            run.failed_step = None
            run.error = None
            logger.info(
                f"[Orchestrator] ✓ Generation completed | run_id: {run.run_id} | "
                f"degraded_steps: {run.degraded_steps}"
            )
            self._emit(run, "completed", "Generation completed")
        return run

    async def retry_step(self, step_name: str) -> Any:
        """
        Re-run exactly one step against the slots currently held.

        Raises:
            UnknownStepError: ``step_name`` is not a pipeline step
            DependencyNotReadyError: a slot the step depends on is empty, or the
                run is still in progress
            StepFailedError: the step failed again (run moves to ERROR)
        """
        spec = self._get_spec(step_name)
        run = self.run
        if not run.prompt:
            raise DependencyNotReadyError("Nothing has been generated yet", step=step_name)
        self._ensure_settled(run, step_name)
        self._check_dependencies(run, spec)

        run.status = GenerationStatus.RUNNING
        self._emit(run, "retry_started", f"Retrying {step_name}", step=step_name)
        try:
            value = await self._execute(run, step_name)
        except Exception as e:
            if self._is_current(run):
                self._fail(run, step_name, e)
            raise self._as_step_error(step_name, e)

        if self._is_current(run):
            self._finish_retry(run, step_name)
            self._emit(run, "retry_completed", f"✓ {step_name} regenerated", step=step_name)
        return value

    async def regenerate_theme(self, prompt: str) -> Theme:
        """Evolve the current Theme from a new description; other slots stay as they are"""
        prompt = (prompt or "").strip()
        run = self.run
        if run.theme is None:
            raise DependencyNotReadyError("No theme to evolve yet", step=THEME)
        self._ensure_settled(run, THEME)
        if not prompt:
            return run.theme

        run.status = GenerationStatus.RUNNING
        self._emit(run, "retry_started", "Regenerating theme", step=THEME)
        try:
            theme = await self._execute(run, THEME, description=prompt, previous_theme=run.theme)
        except Exception as e:
            if self._is_current(run):
                self._fail(run, THEME, e)
            raise self._as_step_error(THEME, e)

        if self._is_current(run):
            self._finish_retry(run, THEME)
            self._emit(run, "retry_completed", "✓ Theme updated", step=THEME)
        return theme

    def update_theme(self, **overrides: Any) -> Theme:
        """Apply manual edits to the current Theme (snake_case or camelCase keys)"""
        run = self.run
        if run.theme is None:
            raise DependencyNotReadyError("No theme to update yet", step=THEME)
        self._ensure_settled(run, THEME)

        fields = Theme.model_fields
        aliases = {info.alias: name for name, info in fields.items() if info.alias}
        data = run.theme.model_dump()
        for key, value in overrides.items():
            name = aliases.get(key, key)
            if name not in fields:
                raise ValueError(f"Unknown theme field: {key}")
            data[name] = value

        run.theme = Theme.model_validate(data)
        self._emit(run, "theme_updated", "Theme edited manually", step=THEME)
        return run.theme

    # ------------------------------------------------------------------
    # Step execution
    # ------------------------------------------------------------------

    def _get_spec(self, step_name: str) -> StepSpec:
        spec = STEPS.get(step_name)
        if spec is None:
            raise UnknownStepError(f"Unknown step: {step_name}. Expected one of {list(STEPS)}", step=step_name)
        return spec

    def _ensure_settled(self, run: GenerationRun, step_name: str) -> None:
        # the in-flight pipeline owns every slot until it settles
        if run.status == GenerationStatus.RUNNING:
            raise DependencyNotReadyError(
                f"Cannot run {step_name}: generation in progress",
                step=step_name,
                hint="Wait for the current run to finish, then retry.",
            )

    def _check_dependencies(self, run: GenerationRun, spec: StepSpec) -> None:
        missing = [dep for dep in spec.depends_on if not run.has_slot(dep)]
        if missing:
            raise DependencyNotReadyError(
                f"Cannot run {spec.name}: {', '.join(missing)} not generated yet",
                step=spec.name,
                hint=f"Generate or retry {missing[0]} first.",
            )

    async def _execute(
        self,
        run: GenerationRun,
        step_name: str,
        description: Optional[str] = None,
        previous_theme: Optional[Theme] = None,
    ) -> Any:
        spec = self._get_spec(step_name)
        self._check_dependencies(run, spec)
        inputs = run.step_inputs(previous_theme=previous_theme)
        if description is not None:
            inputs.description = description

        logger.info(f"[Orchestrator] Running {step_name} | run_id: {run.run_id}")
        self._emit(run, "step_started", f"Generating {step_name}...", step=step_name)

        try:
            if spec.uses_image_search:
                value = await self.image_helper.generate_images(inputs.description)
                degraded = uses_default_images(value)
            else:
                result = await self.caller.call(
                    spec.build_prompt(inputs),
                    spec.max_output_tokens,
                    spec.fallback(inputs),
                    spec.response_model,
                    label=step_name,
                )
                value = spec.extract(result.value)
                degraded = result.used_fallback
        except ApplicationError:
            raise
        except Exception as e:
            logger.error(
                f"[Orchestrator] ✗ {step_name} raised unexpectedly | error_type: {type(e).__name__} | error: {e}",
                exc_info=True,
            )
            raise StepFailedError(f"{step_name} failed: {e}", step=step_name) from e

        if degraded and self.strict:
            raise StepFailedError(
                f"{step_name} produced no usable output",
                step=step_name,
                hint=f"Retry the {step_name} step.",
            )

        if not self._is_current(run):
            logger.debug(f"[Orchestrator] Dropping stale {step_name} result for run {run.run_id}")
            return value

        run.set_slot(step_name, value)
        run.mark_degraded(step_name, degraded)
        detail = f"{step_name} ready" + (" (fallback used)" if degraded else "")
        logger.info(f"[Orchestrator] ✓ {detail} | run_id: {run.run_id}")
        self._emit(run, "step_completed", f"✓ {detail}", step=step_name)
        return value

    @staticmethod
    def _finish_retry(run: GenerationRun, step_name: str) -> None:
        if run.failed_step in (None, step_name):
            run.failed_step = None
            run.error = None
        if run.failed_step:
            run.status = GenerationStatus.ERROR
        else:
            run.status = GenerationStatus.IDLE

    def _fail(self, run: GenerationRun, step_name: str, error: Exception) -> None:
        error = self._as_step_error(step_name, error)
        run.status = GenerationStatus.ERROR
        run.failed_step = step_name
        run.error = error.model_dump()
        logger.error(f"[Orchestrator] ✗ {step_name} failed | run_id: {run.run_id} | error: {error.message}")
        self._emit(run, "failed", f"✗ {error.message}", step=step_name)

    @staticmethod
    def _as_step_error(step_name: str, error: Exception) -> ApplicationError:
        if isinstance(error, ApplicationError):
            if error.step is None:
                error.step = step_name
            return error
        return StepFailedError(f"{step_name} failed: {error}", step=step_name)
