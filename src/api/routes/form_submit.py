"""
Form Submission Router

Submits a UI-collected form directly to an API endpoint described by
``apiInfo``, without a registered tool.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.deps import get_dispatcher
from src.models.requests import FormSubmitRequest
from src.models.responses import ResultEnvelope
from src.tools.dispatcher import RequestDispatcher

router = APIRouter(prefix="/api", tags=["Forms"])


@router.post("/form-submit")
async def submit_form(
    body: FormSubmitRequest,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> Any:
    """
    Submit form data to the endpoint named by apiInfo.

    Returns:
        Result envelope of the submission; 400 when formData or apiInfo is
        missing.
    """
    if body.form_data is None or body.api_info is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ResultEnvelope.fail(
                error="Missing form data or API info",
                message="Form submission failed",
            ).to_payload(),
        )

    envelope = await dispatcher.handle_request(
        {"kind": "form-submit", "formData": body.form_data, "apiInfo": body.api_info}
    )
    return envelope.to_payload()
