"""Mini README: FastAPI JSON API in front of the ledger store.

Structure:
    * create_application - application factory wiring routes to one store.

Authentication is a session cookie whose value is a key in the store's
session store. Input coercion errors become HTTP 400, records that are
missing or owned by another user become 404, and requests without a live
session become 401. The store itself never raises for those cases.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import JSONResponse

from ..configuration import SpendlogSettings, get_settings
from ..ledger import (
    ExpenseCategory,
    LedgerStore,
    User,
    parse_amount,
    parse_date,
)
from ..logging_utils import get_logger
from .security import hash_password, verify_password

LOGGER = get_logger(__name__)

MAX_TREND_MONTHS = 120


def _validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail=f"Month must be between 1 and 12, got {month}")
    if year < 1:
        raise HTTPException(status_code=400, detail=f"Invalid year: {year}")


def create_application(
    store: Optional[LedgerStore] = None,
    settings: Optional[SpendlogSettings] = None,
) -> FastAPI:
    """Create the FastAPI application bound to a single ledger store."""

    settings = settings or get_settings()
    if store is None:
        store = LedgerStore(
            demo_password=hash_password(settings.demo_password),
            session_ttl=timedelta(seconds=settings.session_ttl_seconds),
            session_check_period=timedelta(seconds=settings.session_check_period_seconds),
        )
    sessions = store.session_store
    cookie_name = settings.session_cookie_name

    app = FastAPI(title="Spendlog", version="0.1.0")
    app.state.store = store

    def current_user(request: Request) -> User:
        """Resolve the logged-in user or raise 401."""

        session_id = request.cookies.get(cookie_name)
        session = sessions.get(session_id) if session_id else None
        user = store.get_user(session["user_id"]) if session else None
        if user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return user

    def start_session(user: User) -> JSONResponse:
        session_id = sessions.create({"user_id": user.user_id})
        response = JSONResponse({"user": user.as_dict()})
        response.set_cookie(
            cookie_name,
            session_id,
            max_age=settings.session_ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=settings.is_production,
        )
        return response

    @app.post("/register")
    async def register(username: str = Form(...), password: str = Form(...)) -> JSONResponse:
        """Create an account and log it in."""

        username = username.strip()
        if not username or not password:
            raise HTTPException(status_code=400, detail="Username and password are required")
        if store.get_user_by_username(username) is not None:
            raise HTTPException(status_code=409, detail=f"Username {username} is already taken")
        user = store.create_user(username, hash_password(password))
        return start_session(user)

    @app.post("/login")
    async def login(username: str = Form(...), password: str = Form(...)) -> JSONResponse:
        username = username.strip()
        user = store.get_user_by_username(username)
        if user is None or not verify_password(password, user.password):
            LOGGER.info("Rejected login for %s", username)
            raise HTTPException(status_code=401, detail="Invalid username or password")
        LOGGER.info("User %s logged in", user.user_id)
        return start_session(user)

    @app.post("/logout")
    async def logout(request: Request) -> JSONResponse:
        session_id = request.cookies.get(cookie_name)
        if session_id:
            sessions.destroy(session_id)
        response = JSONResponse({"logged_out": True})
        response.delete_cookie(cookie_name)
        return response

    @app.get("/me")
    async def me(request: Request) -> JSONResponse:
        return JSONResponse({"user": current_user(request).as_dict()})

    @app.get("/categories")
    async def categories() -> JSONResponse:
        return JSONResponse({"categories": [category.value for category in ExpenseCategory]})

    @app.get("/expenses")
    async def list_expenses(request: Request, limit: Optional[int] = None) -> JSONResponse:
        """Return the caller's expenses, most recent first."""

        user = current_user(request)
        if limit is not None and limit < 0:
            raise HTTPException(status_code=400, detail="Limit must not be negative")
        expenses = store.list_expenses_by_user(user.user_id, limit=limit)
        return JSONResponse({"expenses": [expense.as_dict() for expense in expenses]})

    @app.get("/expenses/{year}/{month}")
    async def list_month_expenses(request: Request, year: int, month: int) -> JSONResponse:
        user = current_user(request)
        _validate_period(month, year)
        expenses = store.list_expenses_by_month(user.user_id, month, year)
        return JSONResponse({"expenses": [expense.as_dict() for expense in expenses]})

    @app.post("/expenses")
    async def create_expense(
        request: Request,
        amount: str = Form(...),
        category: str = Form(...),
        occurred_on: str = Form(...),
        description: str = Form(""),
    ) -> JSONResponse:
        """Record an expense for the caller."""

        user = current_user(request)
        try:
            expense = store.create_expense(
                user.user_id,
                amount=parse_amount(amount),
                category=ExpenseCategory.from_str(category),
                occurred_on=parse_date(occurred_on),
                description=description.strip(),
            )
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse({"expense": expense.as_dict()}, status_code=201)

    @app.delete("/expenses/{expense_id}")
    async def delete_expense(request: Request, expense_id: int) -> JSONResponse:
        user = current_user(request)
        expense = store.get_expense(expense_id)
        if expense is None or expense.user_id != user.user_id:
            raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found")
        if not store.delete_expense(expense_id):
            raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found")
        return JSONResponse({"deleted": expense_id})

    @app.get("/budgets/{year}/{month}")
    async def get_budget(request: Request, year: int, month: int) -> JSONResponse:
        user = current_user(request)
        _validate_period(month, year)
        budget = store.get_budget(user.user_id, month, year)
        if budget is None:
            raise HTTPException(status_code=404, detail=f"No budget set for {month:02d}/{year}")
        return JSONResponse({"budget": budget.as_dict()})

    @app.put("/budgets")
    async def set_budget(
        request: Request,
        amount: str = Form(...),
        month: int = Form(...),
        year: int = Form(...),
    ) -> JSONResponse:
        """Create or replace the caller's budget for one month."""

        user = current_user(request)
        _validate_period(month, year)
        try:
            parsed_amount = parse_amount(amount)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        budget = store.create_or_update_budget(user.user_id, amount=parsed_amount, month=month, year=year)
        return JSONResponse({"budget": budget.as_dict()})

    @app.get("/summary/{year}/{month}")
    async def monthly_summary(request: Request, year: int, month: int) -> JSONResponse:
        user = current_user(request)
        _validate_period(month, year)
        summary = store.get_monthly_expense_summary(user.user_id, month, year)
        return JSONResponse({"month": month, "year": year, **summary.as_dict()})

    @app.get("/summary/{year}/{month}/categories")
    async def category_breakdown(request: Request, year: int, month: int) -> JSONResponse:
        user = current_user(request)
        _validate_period(month, year)
        summaries = store.get_category_expenses(user.user_id, month, year)
        return JSONResponse({"categories": [summary.as_dict() for summary in summaries]})

    @app.get("/trends/{category}")
    async def category_trend(request: Request, category: str, months: int = 6) -> JSONResponse:
        """Return per-month totals for one category, oldest month first."""

        user = current_user(request)
        try:
            parsed_category = ExpenseCategory.from_str(category)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        if not 1 <= months <= MAX_TREND_MONTHS:
            raise HTTPException(
                status_code=400, detail=f"Months must be between 1 and {MAX_TREND_MONTHS}"
            )
        points = store.get_monthly_totals_by_category(user.user_id, parsed_category, months)
        LOGGER.debug("Trend for user=%s category=%s months=%s", user.user_id, parsed_category.value, months)
        return JSONResponse(
            {"category": parsed_category.value, "points": [point.as_dict() for point in points]}
        )

    return app
