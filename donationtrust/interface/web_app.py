"""Mini README: FastAPI application for the donation transparency ledger.

Structure:
    * create_application - application factory wiring routes, templates and
      the injected record store.
    * Public JSON routes - stats and the four record listings.
    * Admin JSON routes - create/update per record type behind a bearer check.
    * Pages - transparency dashboard, admin login and admin panel.

Every error leaves the app as ``{"error": <message>}`` with 401 for auth
failures, 400 for constraint or payload problems, 404 for unknown ids and
500 when the store is unavailable or a handler fails unexpectedly.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import timedelta
from functools import partial
from pathlib import Path
from typing import Annotated, Iterator, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi import Path as PathParam
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..auth import AccessGate, AdminIdentity, TokenIssuer
from ..configuration import DonationTrustSettings, get_settings
from ..errors import ConstraintViolation, InvalidCredentials, NotFound, StoreUnavailable, Unauthorized
from ..ledger import MAX_RECORD_ID, compute_stats
from ..logging_utils import get_logger
from ..store import RecordStore
from .formatting import format_amount
from .schemas import CategoryPayload, ExpensePayload, IncomePayload, LoginPayload, ProjectPayload

LOGGER = get_logger(__name__)

RECENT_ROWS = 10

RecordId = Annotated[int, PathParam(ge=1, le=MAX_RECORD_ID)]


def _bearer_credential(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""

    if not authorization:
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credential.strip() or None


def _describe_validation_error(error: dict) -> str:
    """Render one pydantic error as ``field: message``."""

    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location or 'body'}: {error.get('msg', 'invalid value')}"


@contextmanager
def _store_errors() -> Iterator[None]:
    """Translate record store failures into HTTP errors."""

    try:
        yield
    except ConstraintViolation as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    except NotFound as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except StoreUnavailable as error:
        LOGGER.error("Request failed, store unavailable: %s", error)
        raise HTTPException(status_code=500, detail="Record store unavailable") from error


def create_application(
    settings: Optional[DonationTrustSettings] = None,
    store: Optional[RecordStore] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    store = store or RecordStore.from_url(settings.resolved_database_url())
    issuer = TokenIssuer(settings.jwt_secret, ttl=timedelta(hours=settings.token_ttl_hours))
    gate = AccessGate(store, issuer, bcrypt_rounds=settings.bcrypt_rounds)
    gate.ensure_default_admin(settings.default_admin_username, settings.default_admin_password)

    app = FastAPI(title="DonationTrust", version="1.0.0")
    app.state.store = store
    app.state.gate = gate

    interface_directory = Path(__file__).parent
    templates = Jinja2Templates(directory=str(interface_directory / "templates"))
    templates.env.filters["money"] = partial(format_amount, symbol=settings.currency_symbol)
    app.mount("/static", StaticFiles(directory=str(interface_directory / "static")), name="static")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = [_describe_validation_error(error) for error in exc.errors()]
        LOGGER.debug("Rejected payload for %s: %s", request.url.path, problems)
        return JSONResponse({"error": "; ".join(problems) or "Invalid request"}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    def require_admin(authorization: Optional[str] = Header(None)) -> AdminIdentity:
        """Dependency guarding every mutating route."""

        try:
            return gate.authorize(_bearer_credential(authorization))
        except Unauthorized as error:
            raise HTTPException(status_code=401, detail=str(error)) from error

    # Public API -----------------------------------------------------------

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.get("/api/stats")
    def stats() -> JSONResponse:
        """Return overall totals and the per-project breakdown."""

        with _store_errors():
            snapshot = compute_stats(store)
        return JSONResponse(snapshot.as_dict())

    @app.post("/api/login")
    def login(payload: LoginPayload) -> JSONResponse:
        """Exchange admin credentials for a signed token."""

        with _store_errors():
            try:
                token = gate.login(payload.username, payload.password)
            except InvalidCredentials as error:
                raise HTTPException(status_code=401, detail=str(error)) from error
        return JSONResponse({"token": token})

    @app.get("/api/categories")
    def list_categories() -> JSONResponse:
        with _store_errors():
            categories = store.list_categories()
        return JSONResponse([category.as_dict() for category in categories])

    @app.get("/api/projects")
    def list_projects() -> JSONResponse:
        with _store_errors():
            projects = store.list_projects()
        return JSONResponse([project.as_dict() for project in projects])

    @app.get("/api/incomes")
    def list_incomes() -> JSONResponse:
        with _store_errors():
            incomes = store.list_incomes()
        return JSONResponse([income.as_dict() for income in incomes])

    @app.get("/api/expenses")
    def list_expenses() -> JSONResponse:
        with _store_errors():
            expenses = store.list_expenses()
        return JSONResponse([expense.as_dict() for expense in expenses])

    # Admin API ------------------------------------------------------------

    @app.post("/api/categories")
    def create_category(
        payload: CategoryPayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            category = store.create_category(payload.name)
        LOGGER.info("Admin %s created category %s", admin.username, category.id)
        return JSONResponse(category.as_dict())

    @app.put("/api/categories/{category_id}")
    def update_category(
        category_id: RecordId, payload: CategoryPayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            category = store.update_category(category_id, payload.name)
        LOGGER.info("Admin %s updated category %s", admin.username, category_id)
        return JSONResponse(category.as_dict())

    @app.post("/api/projects")
    def create_project(
        payload: ProjectPayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            project = store.create_project(payload.name, payload.category_id, payload.description)
        LOGGER.info("Admin %s created project %s", admin.username, project.id)
        return JSONResponse(project.as_dict())

    @app.put("/api/projects/{project_id}")
    def update_project(
        project_id: RecordId, payload: ProjectPayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            project = store.update_project(
                project_id, payload.name, payload.category_id, payload.description
            )
        LOGGER.info("Admin %s updated project %s", admin.username, project_id)
        return JSONResponse(project.as_dict())

    @app.post("/api/incomes")
    def create_income(
        payload: IncomePayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            income = store.create_income(
                receipt_number=payload.receipt_number,
                amount=payload.amount,
                project_id=payload.project_id,
                date=payload.date,
                donor_name=payload.donor_name,
                notes=payload.notes,
            )
        LOGGER.info("Admin %s recorded income %s", admin.username, income.receipt_number)
        return JSONResponse(income.as_dict())

    @app.put("/api/incomes/{income_id}")
    def update_income(
        income_id: RecordId, payload: IncomePayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            income = store.update_income(
                income_id,
                receipt_number=payload.receipt_number,
                amount=payload.amount,
                project_id=payload.project_id,
                date=payload.date,
                donor_name=payload.donor_name,
                notes=payload.notes,
            )
        LOGGER.info("Admin %s updated income %s", admin.username, income_id)
        return JSONResponse(income.as_dict())

    @app.post("/api/expenses")
    def create_expense(
        payload: ExpensePayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            expense = store.create_expense(
                amount=payload.amount,
                project_id=payload.project_id,
                description=payload.description,
                date=payload.date,
            )
        LOGGER.info("Admin %s recorded expense %s", admin.username, expense.id)
        return JSONResponse(expense.as_dict())

    @app.put("/api/expenses/{expense_id}")
    def update_expense(
        expense_id: RecordId, payload: ExpensePayload, admin: AdminIdentity = Depends(require_admin)
    ) -> JSONResponse:
        with _store_errors():
            expense = store.update_expense(
                expense_id,
                amount=payload.amount,
                project_id=payload.project_id,
                description=payload.description,
                date=payload.date,
            )
        LOGGER.info("Admin %s updated expense %s", admin.username, expense_id)
        return JSONResponse(expense.as_dict())

    # Pages ----------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    def transparency_page(request: Request) -> HTMLResponse:
        """Render public totals, the project breakdown and recent transactions."""

        with _store_errors():
            snapshot = compute_stats(store)
            incomes = store.list_incomes()
            expenses = store.list_expenses()
        LOGGER.debug(
            "Rendering transparency page with %s incomes and %s expenses",
            len(incomes),
            len(expenses),
        )
        return templates.TemplateResponse(
            request,
            "transparency.html",
            {
                "stats": snapshot,
                "incomes": incomes,
                "expenses": expenses[:RECENT_ROWS],
                "recent_rows": RECENT_ROWS,
            },
        )

    @app.get("/login", response_class=HTMLResponse)
    async def login_page(request: Request) -> HTMLResponse:
        return templates.TemplateResponse(request, "login.html", {})

    @app.get("/admin", response_class=HTMLResponse)
    async def admin_page(request: Request) -> HTMLResponse:
        """Serve the admin panel shell; data is loaded by the browser with the token."""

        return templates.TemplateResponse(
            request, "admin.html", {"currency_symbol": settings.currency_symbol}
        )

    return app
