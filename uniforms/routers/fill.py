from fastapi import APIRouter, Depends

from uniforms.backend import BackendClient, get_backend
from uniforms.models.fill import FillForm, SubmissionReceipt, SubmitRequest
from uniforms.services import fill as fill_service

router = APIRouter(prefix="/api/fill", tags=["fill"])


@router.get("/{form_id}")
def load_fill(form_id: str, backend: BackendClient = Depends(get_backend)) -> FillForm:
    return fill_service.load_fill(backend, form_id)


@router.post("/{form_id}", status_code=201)
def submit(form_id: str, request: SubmitRequest, backend: BackendClient = Depends(get_backend)) -> SubmissionReceipt:
    return fill_service.submit(backend, form_id, request.answers)
