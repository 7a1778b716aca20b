"""JSON API mirroring the web routes. Single flights are addressed by flight number."""
from fastapi import APIRouter, Request, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from flightlog.core.errors import FilesystemError, FlightLogError, NotFoundError, StoreError
from flightlog.core.session import SessionUser, get_current_user
from flightlog.models.flight import by_flight_number, serialize
from flightlog.routers.flights import get_flight_service
from flightlog.routers.submission import read_submission
from flightlog.services.flights import FlightService, read_photo

router = APIRouter(prefix="/api")


def login_required() -> JSONResponse:
    return JSONResponse({"success": False, "error": "Login required"}, status_code=401)


def failure(exc: FlightLogError) -> JSONResponse:
    # expected conditions answer 200 with an error field, store/upload failures 500
    status_code = 500 if isinstance(exc, (StoreError, FilesystemError)) else 200
    return JSONResponse({"success": False, "error": exc.detail}, status_code=status_code)


@router.post("/flights")
async def api_create_flight(
    request: Request,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return login_required()

    try:
        fields, upload = await read_submission(request)
        photo = await read_photo(upload)
        flight_id = await run_in_threadpool(flights.create, user.id, fields, photo)
    except FlightLogError as exc:
        return failure(exc)

    return {"success": True, "id": flight_id}


@router.get("/flights")
def api_list_flights(
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return login_required()

    try:
        results = flights.find(user.id)
    except FlightLogError as exc:
        return failure(exc)

    return [serialize(flight) for flight in results]


@router.get("/flights/{flight_number:path}")
def api_get_flight(
    flight_number: str,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return login_required()

    try:
        flight = flights.get(user.id, by_flight_number(flight_number))
    except NotFoundError:
        return {"error": "Not found"}
    except FlightLogError as exc:
        return failure(exc)

    return serialize(flight)


@router.put("/flights/{flight_number:path}")
async def api_update_flight(
    flight_number: str,
    request: Request,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return login_required()

    try:
        fields, upload = await read_submission(request)
        photo = await read_photo(upload)
        modified = await run_in_threadpool(
            flights.update, user.id, by_flight_number(flight_number), fields, photo
        )
    except FlightLogError as exc:
        return failure(exc)

    return {"success": modified > 0}


@router.delete("/flights/{flight_number:path}")
def api_delete_flight(
    flight_number: str,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return login_required()

    try:
        deleted = flights.delete(user.id, by_flight_number(flight_number))
    except FlightLogError as exc:
        return failure(exc)

    return {"success": deleted > 0}


@router.get("/search")
def api_search(
    q: str | None = None,
    flights: FlightService = Depends(get_flight_service),
    user: SessionUser | None = Depends(get_current_user),
):
    if not user:
        return login_required()

    # unlike /list and /search, a blank query is rejected here
    if q is None or not q.strip():
        return {"success": False, "error": "Search query is required"}

    try:
        results = flights.find(user.id, q)
    except FlightLogError as exc:
        return failure(exc)

    return {
        "success": True,
        "count": len(results),
        "searchTerm": q,
        "data": [serialize(flight) for flight in results],
    }
