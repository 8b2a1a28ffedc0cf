"""Mini README: FastAPI routes for the deposit board.

Structure:
    * create_application - application factory wiring routes to a context.
    * _http_error - translation of domain errors into HTTP responses.

Routes keep the query-string style of the browser dashboard: the acting
admin travels as ``?admin=`` and is recorded in the audit log. Login and
registration also accept a JSON body. ``/events`` is a Server-Sent Events
stream that starts with the full state and then receives every update.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse

from ..broadcast import QueueSink
from ..configuration import DepositBoardSettings, get_settings
from ..context import DashboardContext
from ..errors import (
    AuthenticationError,
    DepositBoardError,
    DuplicateKeyError,
    InvalidAmountError,
    NotFoundError,
    PermissionDeniedError,
)
from ..logging_utils import configure_root_logger, get_logger, level_for_environment

LOGGER = get_logger(__name__)

_STATUS_BY_ERROR = (
    (InvalidAmountError, 400),
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (DuplicateKeyError, 409),
    (AuthenticationError, 401),
)


def _http_error(error: Exception) -> HTTPException:
    """Map a domain error (or a bare ``ValueError``) onto an HTTP status."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


async def _credentials_from(
    request: Request, name: Optional[str], password: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    """Fill missing query credentials from a JSON body when one is sent."""

    if name and password:
        return name, password
    body = await request.body()
    if body:
        try:
            parsed = json.loads(body)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            name = name or parsed.get("name")
            password = password or parsed.get("password")
    return name, password


def create_application(
    context: Optional[DashboardContext] = None,
    settings: Optional[DepositBoardSettings] = None,
) -> FastAPI:
    """Create the FastAPI application bound to a dashboard context."""

    settings = settings or get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    if context is None:
        context = DashboardContext.from_settings(settings)
    board = context

    app = FastAPI(title="Deposit Board", version="0.1.0")
    app.state.board = board

    @app.api_route("/add/{value}", methods=["GET", "POST"])
    async def add_deposit(
        value: str,
        user: Optional[str] = None,
        admin: Optional[str] = None,
    ) -> JSONResponse:
        """Record a deposit, optionally attributed to a contributor."""

        try:
            receipt = board.record_deposit(value, contributor=user, actor=admin)
        except InvalidAmountError as error:
            raise _http_error(error) from error
        aggregate = board.ledger.aggregate
        return JSONResponse(
            {
                "message": "Deposit recorded",
                "index": receipt.aggregate_index,
                "time": receipt.label,
                "total": aggregate.as_dict(),
            }
        )

    @app.get("/participants")
    async def participants() -> JSONResponse:
        """List contributors with their deposit counts and totals."""

        summaries = board.list_contributors()
        LOGGER.debug("Returning %s participants", len(summaries))
        return JSONResponse([summary.as_dict() for summary in summaries])

    @app.get("/entries")
    async def entries(user: Optional[str] = None) -> JSONResponse:
        """Return a contributor's deposits with their editable indexes."""

        if not user:
            raise HTTPException(status_code=400, detail="User is required")
        try:
            listed = board.list_entries(user)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse({"entries": listed})

    @app.put("/entry")
    async def edit_entry(
        user: Optional[str] = None,
        index: Optional[str] = None,
        new_time: Optional[str] = Query(None, alias="newTime"),
        admin: Optional[str] = None,
    ) -> JSONResponse:
        """Change the timestamp of one contributor deposit."""

        if not user or index is None or not new_time:
            raise HTTPException(status_code=400, detail="Missing parameters")
        try:
            position = int(index)
        except ValueError as error:
            raise HTTPException(status_code=400, detail="Invalid index") from error
        try:
            previous = board.edit_entry_time(user, position, new_time, actor=admin)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(
            {"message": "Entry time updated", "oldTime": previous, "newTime": new_time}
        )

    @app.put("/users/{contributor_id}")
    async def rename_contributor(
        contributor_id: str,
        new_name: Optional[str] = Query(None, alias="newName"),
        admin: Optional[str] = None,
    ) -> JSONResponse:
        """Rename a contributor, keeping their deposit history."""

        if not new_name:
            raise HTTPException(status_code=400, detail="New name is required")
        try:
            old_name = board.rename_contributor(contributor_id, new_name, actor=admin)
        except DepositBoardError as error:
            raise _http_error(error) from error
        return JSONResponse(
            {"message": "Contributor renamed", "oldName": old_name, "newName": new_name}
        )

    @app.delete("/users/{contributor_id}")
    async def delete_contributor(contributor_id: str, admin: Optional[str] = None) -> JSONResponse:
        """Remove a contributor; the aggregate keeps their deposits."""

        try:
            name = board.delete_contributor(contributor_id, actor=admin)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse({"message": "Contributor removed", "name": name})

    @app.get("/team")
    async def list_team() -> JSONResponse:
        members = board.list_members()
        return JSONResponse(
            [member.as_dict() for member in members],
            headers={"Access-Control-Allow-Origin": "*"},
        )

    @app.post("/team")
    async def create_team_member(
        name: Optional[str] = None,
        description: str = "",
        admin: Optional[str] = None,
    ) -> JSONResponse:
        if not name:
            raise HTTPException(status_code=400, detail="Name is required")
        try:
            member = board.create_member(name, description, actor=admin)
        except (DepositBoardError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse(member.as_dict())

    @app.put("/team/{member_id}")
    async def update_team_member(
        member_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        admin: Optional[str] = None,
    ) -> JSONResponse:
        try:
            member = board.update_member(
                member_id, name=name, description=description, actor=admin
            )
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(member.as_dict())

    @app.delete("/team/{member_id}")
    async def delete_team_member(member_id: str, admin: Optional[str] = None) -> JSONResponse:
        try:
            removed = board.delete_member(member_id, actor=admin)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse(removed.as_dict())

    @app.post("/reset-month")
    async def reset_month(admin: Optional[str] = None) -> JSONResponse:
        """Close the running month and start an empty one."""

        previous, new_period = board.close_period(actor=admin)
        return JSONResponse(
            {"message": "Month reset", "previousMonth": previous, "newMonth": new_period}
        )

    @app.post("/restore-month")
    async def restore_month(
        month: Optional[str] = None, admin: Optional[str] = None
    ) -> JSONResponse:
        """Bring a closed month back as the live state."""

        if not month:
            raise HTTPException(status_code=400, detail="Month is required")
        try:
            board.restore_period(month, actor=admin)
        except NotFoundError as error:
            raise _http_error(error) from error
        return JSONResponse({"message": "Month restored", "month": month})

    @app.get("/history")
    async def history() -> JSONResponse:
        return JSONResponse({"months": board.list_periods()})

    @app.get("/events")
    async def events(request: Request) -> StreamingResponse:
        """Stream the board state to a dashboard as Server-Sent Events."""

        sink = QueueSink(settings.sink_queue_size)
        board.subscribe(sink)

        async def stream() -> AsyncIterator[str]:
            try:
                while not sink.closed:
                    if await request.is_disconnected():
                        break
                    message = await sink.next_message(timeout=settings.keepalive_seconds)
                    yield message if message is not None else ": keep-alive\n\n"
            finally:
                board.unsubscribe(sink)
                LOGGER.debug("Live-update stream closed")

        return StreamingResponse(
            stream(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
            },
        )

    @app.post("/register")
    async def register(
        request: Request, name: Optional[str] = None, password: Optional[str] = None
    ) -> JSONResponse:
        name, password = await _credentials_from(request, name, password)
        try:
            credential = board.register(name, password)
        except (DepositBoardError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse(
            {"message": "Account registered", "user": credential.public_view()},
            status_code=201,
        )

    @app.post("/login")
    async def login(
        request: Request, name: Optional[str] = None, password: Optional[str] = None
    ) -> JSONResponse:
        name, password = await _credentials_from(request, name, password)
        try:
            credential = board.login(name, password)
        except (DepositBoardError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse({"message": "Login successful", "user": credential.public_view()})

    @app.put("/change-password")
    async def change_password(
        admin: Optional[str] = None,
        new_password: Optional[str] = Query(None, alias="newPassword"),
    ) -> JSONResponse:
        try:
            board.change_master_password(admin, new_password)
        except (DepositBoardError, ValueError) as error:
            raise _http_error(error) from error
        return JSONResponse({"message": "Password updated"})

    @app.get("/logs")
    async def logs() -> JSONResponse:
        payload: List[Dict[str, Any]] = [entry.as_dict() for entry in board.audit_entries()]
        return JSONResponse(payload)

    @app.delete("/logs")
    async def clear_logs(admin: Optional[str] = None) -> JSONResponse:
        try:
            board.clear_audit(admin)
        except PermissionDeniedError as error:
            raise _http_error(error) from error
        return JSONResponse({"message": "Logs cleared"})

    return app
