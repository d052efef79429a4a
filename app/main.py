import logging
from typing import List
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import auth, config
from app.accounts import store as accounts
from app.access import routes as access
from app.catalog import routes as catalog
from app import dashboard
from app.db import init_db, get_session
from app.errors import AppError, NotFound, ValidationError
from app.models import CurrentUser, LoginRequest, LoginResponse, SignupRequest, UserOut, UserResponse
from app.policy import Action

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Software Access Requests")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(catalog.router)
app.include_router(access.router)
app.include_router(dashboard.router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Validation error", "errors": errors})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.on_event("startup")
async def startup():
    init_db()
    logger.info("Database ready at %s", config.DATABASE_URL)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/auth/signup", response_model=UserResponse, status_code=201)
async def signup(body: SignupRequest):
    if body.confirm_password is not None and body.confirm_password != body.password:
        raise ValidationError(errors=[{"loc": ["body", "confirmPassword"], "msg": "Passwords do not match", "type": "value_error"}])
    with get_session() as s:
        user = auth.signup(s, body.username, body.password, body.role)
    return UserResponse(user=user)


@app.post("/api/auth/login", response_model=LoginResponse)
async def login(body: LoginRequest):
    with get_session() as s:
        user, token = auth.login(s, body.username, body.password)
    return LoginResponse(user=user, token=token)


@app.get("/api/auth/me", response_model=UserResponse)
async def me(user: CurrentUser = Depends(auth.get_current_user)):
    with get_session() as s:
        acct = accounts.get_user(s, user.user_id)
        if acct is None:
            raise NotFound("User not found")
        return UserResponse(user=accounts.public_user(acct))


@app.get("/api/users", response_model=List[UserOut])
async def list_users(user: CurrentUser = Depends(auth.role_required(Action.LIST_USERS))):
    with get_session() as s:
        return [accounts.public_user(a) for a in accounts.list_users(s)]
