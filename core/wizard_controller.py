# core/wizard_controller.py
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

import httpx

import settings
from clients.dropdowns import DropdownService
from clients.matrimony import MatrimonyAPIError, MatrimonyClient
from core.catalogs import DEFAULT_BLOOD_GROUPS, DEFAULT_COUNTRY, DEFAULT_MARITAL_STATUSES, STATIC_OPTIONS
from core.dependent_fields import DependentFieldGraph
from core.options import Option, resolve_options
from core.prefill import career_from_profile, education_from_profile, form_from_profile, form_from_registration
from core.state_machine import FIRST_STEP, STEP_TITLES, missing_required, next_step, previous_step
from core.step_payloads import assemble_step_payload
from memory.models import CareerRecord, EducationRecord, default_form_state
from telemetry.logger import log_event

logger = logging.getLogger(__name__)

SUBMIT_FAILED_TEXT = "Failed to submit step. Please try again."
SKIP_ALL_FAILED_TEXT = "Failed to skip profile completion"
COMPLETED_TEXT = "Profile completed successfully!"

# Pickers whose stored value may be a legacy name instead of an id.
RECONCILED_FIELDS = ("religion_id", "marital_status", "country")


class WizardPhase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass
class StepOutcome:
    ok: bool
    step: int
    completed: bool = False
    kind: Optional[str] = None  # "validation" | "api" | "busy" | "completed"
    message: Optional[str] = None
    missing: tuple[str, ...] = ()
    redirect_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "step": self.step,
            "completed": self.completed,
            "kind": self.kind,
            "message": self.message,
            "missing": list(self.missing),
            "redirect_to": self.redirect_to,
        }


class ProfileCompletionController:
    """
    Six-step profile completion wizard.

    Owns the form, the education/career lists, the dependent pickers and the
    current step. The remote API client is passed in; nothing here reaches for
    global auth or config.
    """

    def __init__(
        self,
        client: MatrimonyClient,
        *,
        dropdowns: Optional[DropdownService] = None,
        completion_route: str = settings.PROFILE_COMPLETION_ROUTE,
        user_id: Optional[str] = None,
    ):
        self.client = client
        self.dropdowns = dropdowns or DropdownService(client)
        self.completion_route = completion_route
        self.user_id = user_id

        self.form: Dict[str, Any] = default_form_state()
        self.education: List[EducationRecord] = [EducationRecord()]
        self.career: List[CareerRecord] = [CareerRecord()]
        self.step: int = FIRST_STEP
        self.phase: WizardPhase = WizardPhase.IDLE
        self.completed: bool = False
        self.redirect_to: Optional[str] = None
        self.last_outcome: Optional[StepOutcome] = None

        self.graph = DependentFieldGraph(
            self.form,
            fetchers={
                "castes": self.dropdowns.castes,
                "states": self.dropdowns.states,
                "cities": self.dropdowns.cities,
            },
        )

    # -----------------------
    # Read side
    # -----------------------
    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    def option_lists(self) -> Dict[str, List[Option]]:
        merged: Dict[str, List[Option]] = dict(STATIC_OPTIONS)
        merged.update(self.graph.options)
        return merged

    # -----------------------
    # Mount
    # -----------------------
    async def load(self, registration_data: Optional[Mapping[str, Any]] = None) -> None:
        """
        Fetch the dropdown bundle, seed from registration data, prefill from
        the existing profile, then resolve dependent pickers. Failures here are
        logged and leave the affected lists empty.
        """
        await self._load_dropdowns()

        if registration_data:
            self._replace_form(form_from_registration(self.form, registration_data))

        await self._load_profile()

        # seeded and prefilled names resolve to ids before any dependent fetch
        for field in RECONCILED_FIELDS:
            if field in self.graph.options:
                self.graph.apply_options(field, self.graph.options[field])

        await self.graph.initialize()
        log_event("wizard_loaded", {"step": self.step}, user_id=self.user_id)

    async def _fetch_options(self, label: str, fetch: Callable[[], Awaitable[Any]]) -> List[Option]:
        try:
            return resolve_options(await fetch())
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("%s fetch failed: %s", label, e)
            return []

    async def _load_dropdowns(self) -> None:
        bundle: Dict[str, Any] = {}
        try:
            bundle = await self.dropdowns.bundle()
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("dropdown bundle fetch failed: %s", e)

        religions = resolve_options(bundle.get("religions"))
        if not religions:
            religions = await self._fetch_options("religions", self.dropdowns.religions)
        self.graph.apply_options("religion_id", religions)

        statuses = resolve_options(bundle.get("marital_statuses"))
        if not statuses:
            statuses = await self._fetch_options("marital statuses", self.dropdowns.marital_statuses)
        self.graph.apply_options("marital_status", statuses or list(DEFAULT_MARITAL_STATUSES))

        countries = resolve_options(bundle.get("countries"))
        if not countries:
            countries = await self._fetch_options("countries", self.dropdowns.countries)
        self.graph.apply_options("country", countries or [DEFAULT_COUNTRY])

        groups = resolve_options(bundle.get("blood_groups"))
        if not groups:
            groups = await self._fetch_options("blood groups", self.dropdowns.blood_groups)
        # step 5 sends the label, so the label doubles as the id
        groups = [Option(id=o.name, name=o.name) for o in groups]
        self.graph.apply_options("blood_group", groups or list(DEFAULT_BLOOD_GROUPS))

    async def _load_profile(self) -> None:
        try:
            envelope = await self.client.user_info()
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("profile fetch failed: %s", e)
            return
        if not envelope.ok or not envelope.data:
            return

        self._replace_form(form_from_profile(self.form, envelope.data))
        education = education_from_profile(envelope.data)
        if education:
            self.education = education
        career = career_from_profile(envelope.data)
        if career:
            self.career = career

    def _replace_form(self, new_form: Mapping[str, Any]) -> None:
        # the graph holds a reference to self.form, so update in place
        self.form.clear()
        self.form.update(new_form)

    # -----------------------
    # Editing
    # -----------------------
    async def set_field(self, name: str, value: Any) -> bool:
        if name not in self.form:
            raise KeyError(name)
        return await self.graph.set_value(name, value)

    def add_education(self) -> EducationRecord:
        rec = EducationRecord()
        self.education.append(rec)
        return rec

    def update_education(self, index: int, field: str, value: str) -> EducationRecord:
        return _update_record(self.education, index, field, value)

    def remove_education(self, index: int) -> None:
        del self.education[index]

    def add_career(self) -> CareerRecord:
        rec = CareerRecord()
        self.career.append(rec)
        return rec

    def update_career(self, index: int, field: str, value: str) -> CareerRecord:
        return _update_record(self.career, index, field, value)

    def remove_career(self, index: int) -> None:
        del self.career[index]

    # -----------------------
    # Transitions
    # -----------------------
    def _finish(self, step: int, message: Optional[str] = None) -> StepOutcome:
        self.completed = True
        self.redirect_to = self.completion_route
        log_event("wizard_completed", {"step": step}, user_id=self.user_id)
        return StepOutcome(
            ok=True,
            step=step,
            completed=True,
            kind="completed",
            message=message,
            redirect_to=self.redirect_to,
        )

    def _advance(self, step: int, message: Optional[str] = None) -> StepOutcome:
        nxt = next_step(step)
        if nxt is None:
            return self._finish(step, message)
        self.step = nxt
        return StepOutcome(ok=True, step=nxt)

    def _guard(self) -> Optional[StepOutcome]:
        if self.completed:
            return StepOutcome(ok=False, step=self.step, completed=True, kind="completed", redirect_to=self.redirect_to)
        if self.phase is WizardPhase.SUBMITTING:
            return StepOutcome(ok=False, step=self.step, kind="busy")
        return None

    def _records_for(self, step: int) -> List[Any]:
        if step == 3:
            return list(self.education)
        if step == 4:
            return list(self.career)
        return []

    async def submit(self) -> StepOutcome:
        blocked = self._guard()
        if blocked:
            self.last_outcome = blocked
            return blocked

        step = self.step
        missing = missing_required(step, self.form, self._records_for(step))
        if missing:
            outcome = StepOutcome(
                ok=False,
                step=step,
                kind="validation",
                message="Please fill in: " + ", ".join(missing),
                missing=tuple(missing),
            )
            self.last_outcome = outcome
            return outcome

        payload = assemble_step_payload(step, self.form, self.education, self.career, self.graph.options)
        self.phase = WizardPhase.SUBMITTING
        try:
            envelope = await self.client.submit_step(step, payload)
            if envelope.ok:
                log_event("step_submitted", {"step": step}, user_id=self.user_id)
                outcome = self._advance(step, COMPLETED_TEXT)
            else:
                message = envelope.error_text(SUBMIT_FAILED_TEXT)
                log_event("step_failed", {"step": step, "error_code": "REJECTED"}, user_id=self.user_id)
                outcome = StepOutcome(ok=False, step=step, kind="api", message=message)
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("step %s submit failed: %s", step, e)
            log_event("step_failed", {"step": step, "error_code": "UPSTREAM"}, user_id=self.user_id)
            outcome = StepOutcome(ok=False, step=step, kind="api", message=str(e) or SUBMIT_FAILED_TEXT)
        finally:
            self.phase = WizardPhase.IDLE

        self.last_outcome = outcome
        return outcome

    async def skip(self) -> StepOutcome:
        """Best effort: the skip call's result never holds the user back."""
        blocked = self._guard()
        if blocked:
            self.last_outcome = blocked
            return blocked

        step = self.step
        self.phase = WizardPhase.SUBMITTING
        try:
            envelope = await self.client.skip_step(step)
            if not envelope.ok:
                logger.warning("step %s skip rejected: %s", step, envelope.error_text("no message"))
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("step %s skip failed: %s", step, e)
        finally:
            self.phase = WizardPhase.IDLE

        log_event("step_skipped", {"step": step}, user_id=self.user_id)
        outcome = self._advance(step)
        self.last_outcome = outcome
        return outcome

    def previous(self) -> int:
        if not self.completed:
            self.step = previous_step(self.step)
        return self.step

    async def skip_all(self) -> StepOutcome:
        blocked = self._guard()
        if blocked:
            self.last_outcome = blocked
            return blocked

        step = self.step
        self.phase = WizardPhase.SUBMITTING
        try:
            envelope = await self.client.skip_all()
            ok, message = envelope.ok, envelope.error_text(SKIP_ALL_FAILED_TEXT)
        except (MatrimonyAPIError, httpx.HTTPError) as e:
            logger.warning("skip-all failed: %s", e)
            ok, message = False, SKIP_ALL_FAILED_TEXT
        finally:
            self.phase = WizardPhase.IDLE

        if ok:
            log_event("wizard_skipped_all", {"step": step}, user_id=self.user_id)
            outcome = self._finish(step)
        else:
            outcome = StepOutcome(ok=False, step=step, kind="api", message=message)
        self.last_outcome = outcome
        return outcome


def _update_record(records: List[Any], index: int, field: str, value: str) -> Any:
    rec = records[index]
    if field not in {f.name for f in fields(rec)}:
        raise KeyError(field)
    setattr(rec, field, "" if value is None else str(value))
    return rec
