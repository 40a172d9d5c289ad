import logging
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import create_access_token, forbidden, verify_admin, verify_jwt
from config import get_settings, setup_logging
from database import (
    Database,
    connect,
    delete_result,
    find_all,
    get_db,
    insert_result,
    object_id,
    update_result,
)
from schemas import (
    AdminStatus,
    DeleteResult,
    ErrorResponse,
    InsertResult,
    MessageResponse,
    TokenResponse,
    UpdateResult,
)

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.db = None
    try:
        app.state.db = connect(settings)
        app.state.db.ping()
        logger.info("Pinged your deployment. You successfully connected to MongoDB!")
    except PyMongoError as exc:
        # keep serving; every storage call will answer 500 until the database is back
        logger.error("MongoDB unavailable: %s", exc)
    logger.info("bistro boss is running on port %s", settings.port)

    yield

    if app.state.db is not None:
        app.state.db.close()
        logger.info("MongoDB client closed")


# App and CORS
app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error envelopes

def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    body = ErrorResponse(message=message).model_dump()
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, message or "invalid request")


@app.exception_handler(PyMongoError)
async def storage_exception_handler(request: Request, exc: PyMongoError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "storage failure")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


# Routes
@app.get("/", response_class=PlainTextResponse)
def root():
    return "bistro boss is running"


# JWT
@app.post("/jwt", response_model=TokenResponse)
def issue_token(user: dict = Body(...)):
    return {"token": create_access_token(user)}


# Users
@app.get("/users")
def list_users(db: Database = Depends(get_db), decoded: dict = Depends(verify_admin)):
    return find_all(db.users)


@app.post("/users", response_model=Union[InsertResult, MessageResponse])
def create_user(user: dict = Body(...), db: Database = Depends(get_db)):
    existing = db.users.find_one({"email": user.get("email")})
    if existing:
        return {"message": "User already exist!"}
    return insert_result(db.users.insert_one(user))


@app.get("/users/admin/{email}", response_model=AdminStatus)
def check_admin(email: str, db: Database = Depends(get_db), decoded: dict = Depends(verify_jwt)):
    if email != decoded.get("email"):
        return {"admin": False}
    user = db.users.find_one({"email": email})
    return {"admin": bool(user) and user.get("role") == "admin"}


# NOTE: promotion and user deletion take no token, so any caller can run them
@app.patch("/users/admin/{id}", response_model=UpdateResult)
def make_admin(id: str, db: Database = Depends(get_db)):
    result = db.users.update_one({"_id": object_id(id)}, {"$set": {"role": "admin"}})
    return update_result(result)


@app.delete("/users/delete/{id}", response_model=DeleteResult)
def delete_user(id: str, db: Database = Depends(get_db)):
    logger.info("Deleting user %s", id)
    return delete_result(db.users.delete_one({"_id": object_id(id)}))


# Menu
@app.get("/menu")
def list_menu(db: Database = Depends(get_db)):
    return find_all(db.menu)


@app.post("/menu", response_model=InsertResult)
def add_menu_item(item: dict = Body(...), db: Database = Depends(get_db), decoded: dict = Depends(verify_admin)):
    return insert_result(db.menu.insert_one(item))


@app.delete("/menu/{id}", response_model=DeleteResult)
def delete_menu_item(id: str, db: Database = Depends(get_db), decoded: dict = Depends(verify_admin)):
    query = {"_id": object_id(id)}
    logger.info("Deleting menu item %s", id)
    return delete_result(db.menu.delete_one(query))


# Reviews
@app.get("/reviews")
def list_reviews(db: Database = Depends(get_db)):
    return find_all(db.reviews)


# Carts
@app.get("/carts")
def list_cart(
    email: Optional[str] = None,
    db: Database = Depends(get_db),
    decoded: dict = Depends(verify_jwt),
):
    if not email:
        return []
    if email != decoded.get("email"):
        raise forbidden()
    return find_all(db.carts, {"email": email})


# NOTE: carts are not tied to the caller on insert or delete
@app.post("/carts", response_model=InsertResult)
def add_to_cart(item: dict = Body(...), db: Database = Depends(get_db)):
    return insert_result(db.carts.insert_one(item))


@app.delete("/carts/{id}", response_model=DeleteResult)
def delete_cart_item(id: str, db: Database = Depends(get_db)):
    logger.info("Deleting cart item %s", id)
    return delete_result(db.carts.delete_one({"_id": object_id(id)}))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.port)
