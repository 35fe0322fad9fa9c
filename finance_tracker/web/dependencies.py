"""
Request Dependencies

Dependencies and request helpers shared by the routes:
- access to the application's components
- the authentication gate for protected JSON endpoints
- parsing of posted bodies into explicit request models (the routes call
  these themselves and answer with their own failure message)
"""

from typing import Any

from fastapi import Depends, Request
from pydantic import ValidationError as PydanticValidationError

from finance_tracker.credentials import AuthError
from finance_tracker.models.transaction import TransactionForm
from finance_tracker.models.user import CredentialsForm
from finance_tracker.orchestrator import AppComponents
from finance_tracker.validation import ValidationError


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


async def require_user_id(
    request: Request,
    components: AppComponents = Depends(get_components),
) -> str:
    """
    The logged-in user's id.

    Raises AuthError (answered with 401) when there is no live session.
    """
    user_id = await components.sessions.current_user_id(request)
    if user_id is None:
        components.audit_logger.log_unauthorized(request.url.path)
        raise AuthError("Unauthorized")
    return user_id


async def read_body(request: Request) -> dict[str, Any]:
    """
    Read a posted body as a flat dict.

    Accepts JSON objects as well as urlencoded and multipart forms.
    Uploaded files are ignored.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(body, dict):
            raise ValidationError("JSON body must be an object")
        return body

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


async def credentials_form(request: Request) -> CredentialsForm:
    try:
        return CredentialsForm.model_validate(await read_body(request))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid credentials form: {e.errors()[0]['msg']}")


async def transaction_form(request: Request) -> TransactionForm:
    try:
        return TransactionForm.model_validate(await read_body(request))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid transaction form: {e.errors()[0]['msg']}")
