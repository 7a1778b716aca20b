from fastapi import APIRouter, Request, Form, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from pymongo.database import Database

from flightlog.core.errors import AuthError, ConflictError, StoreError, ValidationError
from flightlog.core.session import get_current_user
from flightlog.models.database import get_db
from flightlog.services.auth import AuthService
from flightlog.templating import templates

router = APIRouter()


def get_auth_service(db: Database = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    return templates.TemplateResponse(request, "register.html", {"error": None})


@router.post("/register")
def register(
    request: Request,
    username: str | None = Form(None),
    password: str | None = Form(None),
    name: str | None = Form(None),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        auth.register(username, password, name)
    except (ValidationError, ConflictError, StoreError) as exc:
        return templates.TemplateResponse(request, "register.html", {"error": exc.detail})

    # no auto-login: send them to the login form
    return templates.TemplateResponse(request, "login.html", {"error": "Registered! Please login."})


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {"error": None})


@router.post("/login")
def login(
    request: Request,
    username: str | None = Form(None),
    password: str | None = Form(None),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        user = auth.login(username, password)
        token = request.app.state.sessions.create(user)
    except (AuthError, StoreError) as exc:
        return templates.TemplateResponse(request, "login.html", {"error": exc.detail})

    # login success → set the session cookie
    settings = request.app.state.settings
    response = RedirectResponse(url="/list", status_code=303)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.get("/logout")
def logout(request: Request):
    settings = request.app.state.settings
    try:
        request.app.state.sessions.destroy(request.cookies.get(settings.session_cookie_name))
    except StoreError:
        pass  # the cookie is cleared either way
    response = RedirectResponse(url="/login", status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    if get_current_user(request):
        return RedirectResponse(url="/list", status_code=303)
    return RedirectResponse(url="/login", status_code=303)
