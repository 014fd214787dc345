# api/wizard.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from clients.matrimony import MatrimonyClient
from core.auth_utils import get_bearer_token, session_key
from core.wizard_controller import ProfileCompletionController, StepOutcome
from memory.store import get_session, put_session, drop_session

router = APIRouter(prefix="/profile-completion", tags=["profile-completion"])

ClientFactory = Callable[[str], MatrimonyClient]


def get_client_factory() -> ClientFactory:
    return lambda token: MatrimonyClient(token=token)


# ----------------------------
# Shared response shapes
# ----------------------------
class OptionItem(BaseModel):
    id: str
    name: str


class OutcomeItem(BaseModel):
    ok: bool
    step: int
    completed: bool = False
    kind: Optional[str] = None
    message: Optional[str] = None
    missing: List[str] = Field(default_factory=list)
    redirect_to: Optional[str] = None


class WizardView(BaseModel):
    step: int
    title: str
    phase: str
    completed: bool
    redirectTo: Optional[str] = None
    form: Dict[str, Any] = Field(default_factory=dict)
    education: List[Dict[str, str]] = Field(default_factory=list)
    career: List[Dict[str, str]] = Field(default_factory=list)
    options: Dict[str, List[OptionItem]] = Field(default_factory=dict)
    outcome: Optional[OutcomeItem] = None


# ----------------------------
# Requests
# ----------------------------
class StartRequest(BaseModel):
    registrationData: Optional[Dict[str, Any]] = None


class FieldChange(BaseModel):
    field: str
    value: str = ""


# ----------------------------
# Helpers
# ----------------------------
def _view(ctl: ProfileCompletionController, outcome: Optional[StepOutcome] = None) -> WizardView:
    return WizardView(
        step=ctl.step,
        title=ctl.title,
        phase=ctl.phase.value,
        completed=ctl.completed,
        redirectTo=ctl.redirect_to,
        form=dict(ctl.form),
        education=[r.to_dict() for r in ctl.education],
        career=[r.to_dict() for r in ctl.career],
        options={k: [OptionItem(**o.to_dict()) for o in v] for k, v in ctl.option_lists().items()},
        outcome=OutcomeItem(**outcome.to_dict()) if outcome else None,
    )


def _session(token: str = Depends(get_bearer_token)) -> ProfileCompletionController:
    ctl = get_session(session_key(token))
    if ctl is None:
        raise HTTPException(status_code=404, detail="No profile completion in progress")
    return ctl


# ----------------------------
# Routes
# ----------------------------
@router.post("/start", response_model=WizardView)
async def start(
    req: StartRequest,
    token: str = Depends(get_bearer_token),
    make_client: ClientFactory = Depends(get_client_factory),
) -> WizardView:
    key = session_key(token)
    ctl = ProfileCompletionController(make_client(token), user_id=key[:16])
    await ctl.load(registration_data=req.registrationData)
    put_session(key, ctl)
    return _view(ctl)


@router.get("", response_model=WizardView)
async def current(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    return _view(ctl, ctl.last_outcome)


@router.post("/field", response_model=WizardView)
async def change_field(req: FieldChange, ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    try:
        await ctl.set_field(req.field, req.value)
    except KeyError:
        raise HTTPException(status_code=422, detail=f"Unknown field: {req.field}")
    return _view(ctl)


@router.post("/education", response_model=WizardView)
async def add_education(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    ctl.add_education()
    return _view(ctl)


@router.patch("/education/{index}", response_model=WizardView)
async def update_education(
    req: FieldChange, index: int = Path(ge=0), ctl: ProfileCompletionController = Depends(_session)
) -> WizardView:
    try:
        ctl.update_education(index, req.field, req.value)
    except (IndexError, KeyError):
        raise HTTPException(status_code=422, detail="Unknown education entry or field")
    return _view(ctl)


@router.delete("/education/{index}", response_model=WizardView)
async def remove_education(
    index: int = Path(ge=0), ctl: ProfileCompletionController = Depends(_session)
) -> WizardView:
    try:
        ctl.remove_education(index)
    except IndexError:
        raise HTTPException(status_code=422, detail="Unknown education entry")
    return _view(ctl)


@router.post("/career", response_model=WizardView)
async def add_career(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    ctl.add_career()
    return _view(ctl)


@router.patch("/career/{index}", response_model=WizardView)
async def update_career(
    req: FieldChange, index: int = Path(ge=0), ctl: ProfileCompletionController = Depends(_session)
) -> WizardView:
    try:
        ctl.update_career(index, req.field, req.value)
    except (IndexError, KeyError):
        raise HTTPException(status_code=422, detail="Unknown career entry or field")
    return _view(ctl)


@router.delete("/career/{index}", response_model=WizardView)
async def remove_career(
    index: int = Path(ge=0), ctl: ProfileCompletionController = Depends(_session)
) -> WizardView:
    try:
        ctl.remove_career(index)
    except IndexError:
        raise HTTPException(status_code=422, detail="Unknown career entry")
    return _view(ctl)


@router.post("/next", response_model=WizardView)
async def submit_step(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    outcome = await ctl.submit()
    return _view(ctl, outcome)


@router.post("/skip", response_model=WizardView)
async def skip_step(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    outcome = await ctl.skip()
    return _view(ctl, outcome)


@router.post("/previous", response_model=WizardView)
async def previous_step(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    ctl.previous()
    return _view(ctl)


@router.post("/skip-all", response_model=WizardView)
async def skip_all(ctl: ProfileCompletionController = Depends(_session)) -> WizardView:
    outcome = await ctl.skip_all()
    return _view(ctl, outcome)


@router.delete("", status_code=204)
async def discard(token: str = Depends(get_bearer_token)) -> None:
    drop_session(session_key(token))
