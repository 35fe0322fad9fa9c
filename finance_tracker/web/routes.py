"""
HTTP Routes

Pages, auth, transaction submission and data queries.

Protected pages redirect anonymous visitors to the login page; protected
JSON endpoints answer 401. Failures are reported by status code and a
short message only: the browser never sees error details.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import (
    FileResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
    Response,
)

from finance_tracker.models.transaction import (
    CategoryTotal,
    MonthlySummary,
    MonthlyTotals,
)
from finance_tracker.models.user import CredentialsForm
from finance_tracker.orchestrator import AppComponents
from finance_tracker.services.sessions import SessionError
from finance_tracker.services.storage import PersistenceError
from finance_tracker.validation import ValidationError
from finance_tracker.web.dependencies import (
    credentials_form,
    get_components,
    require_user_id,
    transaction_form,
)


STATIC_DIR = Path(__file__).parent / "static"

TRANSACTION_ADDED_ALERT = "Transaction added successfully!"

router = APIRouter()


def page(filename: str) -> FileResponse:
    return FileResponse(STATIC_DIR / filename, media_type="text/html")


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def server_error(message: str, as_json: bool = False) -> Response:
    if as_json:
        return JSONResponse(
            {"error": message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def protected_page(
    request: Request,
    components: AppComponents,
    filename: str,
) -> Response:
    if not await components.sessions.is_authenticated(request):
        return redirect("/")
    return page(filename)


# =============================================================================
# PAGES
# =============================================================================

@router.get("/")
async def login_page():
    return page("login.html")


@router.get("/signup")
async def signup_page():
    return page("signup.html")


@router.get("/addTransaction")
async def add_transaction_page(
    request: Request,
    components: AppComponents = Depends(get_components),
):
    return await protected_page(request, components, "addTransaction.html")


@router.get("/overview")
async def overview_page(
    request: Request,
    components: AppComponents = Depends(get_components),
):
    return await protected_page(request, components, "overview.html")


@router.get("/charts")
async def charts_page(
    request: Request,
    components: AppComponents = Depends(get_components),
):
    return await protected_page(request, components, "chart.html")


@router.get("/health")
async def health():
    return {"status": "ok"}


# =============================================================================
# DATA QUERIES
# =============================================================================

@router.get("/overview-data", response_model=MonthlySummary)
async def overview_data(
    user_id: str = Depends(require_user_id),
    components: AppComponents = Depends(get_components),
):
    """Totals and transactions for the current UTC month."""
    try:
        return await components.aggregations.monthly_summary(user_id)
    except PersistenceError as e:
        components.audit_logger.log_error("overview", str(e))
        return server_error("Error fetching overview", as_json=True)


@router.get("/chart", response_model=list[CategoryTotal])
async def chart_data(
    month: Optional[str] = Query(default=None, description="YYYY-MM"),
    user_id: str = Depends(require_user_id),
    components: AppComponents = Depends(get_components),
):
    """Expenses per category for `month` (default: current UTC month)."""
    try:
        return await components.aggregations.category_breakdown(user_id, month)
    except (ValidationError, PersistenceError) as e:
        components.audit_logger.log_error("chart", str(e), {"month": month})
        return server_error("Error fetching expenses by category", as_json=True)


@router.get("/monthly-overview", response_model=list[MonthlyTotals])
async def monthly_overview(
    user_id: str = Depends(require_user_id),
    components: AppComponents = Depends(get_components),
):
    """Income and expense totals for every month with activity."""
    try:
        return await components.aggregations.all_months_summary(user_id)
    except PersistenceError as e:
        components.audit_logger.log_error("monthly_overview", str(e))
        return server_error("Error fetching monthly overview", as_json=True)


# =============================================================================
# AUTH
# =============================================================================

@router.post("/signup")
async def signup(
    request: Request,
    components: AppComponents = Depends(get_components),
):
    form: Optional[CredentialsForm] = None
    try:
        form = await credentials_form(request)
        user_id = await components.credentials.register(form.email, form.password)
    except (ValidationError, PersistenceError) as e:
        components.audit_logger.log_registration_failed(
            form.email if form else None, str(e)
        )
        return server_error("Error during user registration")

    components.audit_logger.log_user_registered(user_id, form.email)
    return redirect("/")


@router.post("/login")
async def login(
    request: Request,
    components: AppComponents = Depends(get_components),
):
    try:
        form = await credentials_form(request)
    except ValidationError as e:
        components.audit_logger.log_error("login", str(e))
        return server_error("Error during login")

    try:
        user = await components.credentials.verify(form.email, form.password)
        if user is None:
            components.audit_logger.log_login_failed(form.email)
            return PlainTextResponse(
                "Invalid email or password",
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        response = redirect("/overview")
        await components.sessions.login(response, user)
    except (PersistenceError, SessionError) as e:
        components.audit_logger.log_error("login", str(e))
        return server_error("Error during login")

    components.audit_logger.log_login_succeeded(user.id)
    return response


@router.get("/logout")
async def logout(
    request: Request,
    components: AppComponents = Depends(get_components),
):
    response = redirect("/")
    try:
        user_id = await components.sessions.logout(request, response)
    except SessionError as e:
        components.audit_logger.log_logout_failed(str(e))
        return server_error("Error logging out")

    components.audit_logger.log_logout(user_id)
    return response


# =============================================================================
# TRANSACTIONS
# =============================================================================

@router.post("/addTransaction")
async def add_transaction(
    request: Request,
    user_id: str = Depends(require_user_id),
    components: AppComponents = Depends(get_components),
):
    try:
        form = await transaction_form(request)
        await components.transactions.create(
            user_id=user_id,
            transaction_type=form.type,
            amount=form.amount,
            category=form.category,
            note=form.note,
            transaction_date=form.date,
        )
    except ValidationError as e:
        components.audit_logger.log_transaction_rejected(user_id, str(e))
        return server_error("Error during transaction submission")
    except PersistenceError as e:
        components.audit_logger.log_error("add_transaction", str(e))
        return server_error("Error during transaction submission")

    return redirect(f"/addTransaction?alert={quote(TRANSACTION_ADDED_ALERT, safe='!')}")
