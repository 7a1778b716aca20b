from urllib.parse import quote

from fastapi import APIRouter, Request, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, RedirectResponse
from pymongo.database import Database

from flightlog.core.errors import FlightLogError, NotFoundError
from flightlog.core.session import SessionUser, get_current_user
from flightlog.models.database import get_db
from flightlog.models.flight import by_flight_number, by_id
from flightlog.routers.submission import read_submission
from flightlog.services.flights import FlightService, read_photo
from flightlog.templating import templates

router = APIRouter()


def get_flight_service(db: Database = Depends(get_db)) -> FlightService:
    return FlightService(db)


def _to_login() -> RedirectResponse:
    return RedirectResponse(url="/login", status_code=303)


def _to_list(**params: str) -> RedirectResponse:
    query = "&".join(f"{key}={quote(value)}" for key, value in params.items())
    return RedirectResponse(url=f"/list?{query}" if query else "/list", status_code=303)


def _info(request: Request, message: str, user: SessionUser | None):
    return templates.TemplateResponse(request, "info.html", {"message": message, "user": user})


# --- show user's flights, optionally filtered ---
@router.get("/list", response_class=HTMLResponse)
def list_flights(
    request: Request,
    q: str | None = None,
    success: str | None = None,
    error: str | None = None,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        results = flights.find(user.id, q)
    except FlightLogError as exc:
        results, error = [], exc.detail

    return templates.TemplateResponse(
        request,
        "list.html",
        {
            "flights": results,
            "user": user,
            "success": success,
            "error": error,
            "searchTerm": q or "",
            "resultsCount": len(results),
        },
    )


# --- standalone search results ---
@router.get("/search", response_class=HTMLResponse)
def search_flights(
    request: Request,
    q: str | None = None,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        results = flights.find(user.id, q)
    except FlightLogError as exc:
        return _info(request, exc.detail, user)

    return templates.TemplateResponse(
        request,
        "search.html",
        {
            "flights": results,
            "user": user,
            "searchTerm": q or "",
            "resultsCount": len(results),
        },
    )


@router.get("/details", response_class=HTMLResponse)
def flight_details(
    request: Request,
    flight_id: str | None = Query(None, alias="_id"),
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        flight = flights.get(user.id, by_id(flight_id))
    except NotFoundError:
        return _info(request, "Flight not found", user)
    except FlightLogError as exc:
        return _info(request, exc.detail, user)

    return templates.TemplateResponse(request, "details.html", {"flight": flight, "user": user})


# --- add a new flight ---
@router.post("/flights")
async def create_flight(
    request: Request,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        fields, upload = await read_submission(request)
        photo = await read_photo(upload)
        await run_in_threadpool(flights.create, user.id, fields, photo)
    except FlightLogError as exc:
        return _to_list(error=exc.detail)

    return _to_list(success="Flight added successfully")


@router.get("/edit", response_class=HTMLResponse)
def edit_page(
    request: Request,
    flight_id: str | None = Query(None, alias="_id"),
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        flight = flights.get(user.id, by_id(flight_id))
    except NotFoundError:
        return _info(request, "Access denied", user)
    except FlightLogError as exc:
        return _info(request, exc.detail, user)

    return templates.TemplateResponse(request, "edit.html", {"flight": flight, "user": user})


# --- edit a flight (looked up by internal id) ---
@router.put("/flights/{flight_id}")
async def update_flight(
    flight_id: str,
    request: Request,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        fields, upload = await read_submission(request)
        photo = await read_photo(upload)
        await run_in_threadpool(flights.update, user.id, by_id(flight_id), fields, photo)
    except NotFoundError:
        pass  # malformed id: nothing to update
    except FlightLogError as exc:
        return _to_list(error=exc.detail)

    return _to_list(success="Flight updated")


# --- delete a flight (looked up by flight number) ---
@router.delete("/flights/{flight_number:path}")
def delete_flight(
    flight_number: str,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return _to_login()

    try:
        flights.delete(user.id, by_flight_number(flight_number))
    except FlightLogError as exc:
        return _to_list(error=exc.detail)

    return _to_list(success="Flight deleted")


@router.get("/api-test", response_class=HTMLResponse)
def api_test_page(request: Request, user: SessionUser | None = Depends(get_current_user)):
    if not user:
        return _to_login()
    return templates.TemplateResponse(request, "api-test.html", {"user": user})
