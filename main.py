import os
import logging

from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db, init_db
from models import Booking, BookingStatus, User
from schemas import (
    BookingItems,
    BookingCreate,
    BookingOut,
    BookingStatusUpdate,
    PriceEstimateRequest,
    PriceEstimate,
    UserSignup,
    UserLogin,
    SessionUser,
)
from auth import hash_password, verify_password, create_access_token, get_current_session
from utils.pricing import BASE_FARE, DEFAULT_ESTIMATE, ITEM_SURCHARGES, estimate_price, format_price
from utils.lifecycle import available_actions, statuses_for


# ===============================
# LOGGING
# ===============================
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ===============================
# APP INIT
# ===============================
app = FastAPI(title="Key2Rent Moving Backend")


# ===============================
# CORS
# ===============================
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===============================
# DB INIT
# ===============================
init_db()


# ===============================
# ERRORS
# ===============================
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query"))
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])

    detail = "Invalid input. " + "; ".join(problems)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": detail})


def commit_or_500(db: Session, action: str, conflict_detail: str | None = None):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if conflict_detail is None:
            logger.exception("Integrity error while trying to %s", action)
            raise HTTPException(status_code=500, detail=f"Failed to {action}")
        logger.warning("Conflict while trying to %s: %s", action, conflict_detail)
        raise HTTPException(status_code=400, detail=conflict_detail)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while trying to %s", action)
        raise HTTPException(status_code=500, detail=f"Failed to {action}")


def booking_to_dict(b: Booking):
    try:
        items = BookingItems.model_validate_json(b.items or "{}")
        status = BookingStatus(b.status)
    except (ValidationError, ValueError):
        logger.exception("Booking %s has malformed stored data", b.id)
        raise HTTPException(status_code=500, detail="Stored booking data is malformed")

    return {
        "id": b.id,
        "customer_name": b.customer_name,
        "phone_number": b.phone_number,
        "pickup_location": b.pickup_location,
        "dropoff_location": b.dropoff_location,
        "moving_date": b.moving_date,
        "items": items.model_dump(by_alias=True),
        "price": float(b.price),
        "status": status,
        "actions": available_actions(status),
        "created_at": b.created_at,
        "updated_at": b.updated_at,
    }


# ===============================
# HEALTH CHECK
# ===============================
@app.get("/")
def home():
    return {"status": "Backend running"}


# =====================================================
# BOOKINGS
# =====================================================
@app.get("/api/getBookings", response_model=list[BookingOut])
def get_bookings(
    status: str | None = None,
    view: str | None = None,
    db: Session = Depends(get_db),
):
    try:
        selected = statuses_for(status, view)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    query = db.query(Booking)
    if selected is not None:
        query = query.filter(Booking.status.in_([s.value for s in selected]))

    try:
        bookings = query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    except SQLAlchemyError:
        logger.exception("Database error while fetching bookings")
        raise HTTPException(status_code=500, detail="Failed to fetch bookings")

    return [booking_to_dict(b) for b in bookings]


@app.post("/api/addBooking", status_code=201)
def add_booking(data: BookingCreate, db: Session = Depends(get_db)):
    price = estimate_price(data.items)
    if data.price is not None and data.price != price:
        logger.warning(
            "Submitted price %s differs from computed price %s, using computed",
            data.price, price,
        )

    booking = Booking(
        customer_name=data.full_name,
        phone_number=data.phone_number,
        pickup_location=data.pickup_location,
        dropoff_location=data.dropoff_location,
        moving_date=data.moving_date,
        items=data.items.model_dump_json(by_alias=True),
        price=price,
        status=BookingStatus.PENDING.value,
    )

    db.add(booking)
    commit_or_500(db, "add booking")
    db.refresh(booking)

    logger.info(
        "Booking %s created for %s (items: %s, price: %s)",
        booking.id, booking.customer_name, ", ".join(data.items.selected()) or "none", price,
    )

    return {
        "message": "Booking added successfully",
        "booking_id": booking.id,
        "price": float(price),
    }


@app.post("/api/updateBookingStatus")
def update_booking_status(data: BookingStatusUpdate, db: Session = Depends(get_db)):
    try:
        booking = db.query(Booking).filter(Booking.id == data.id).first()
    except SQLAlchemyError:
        logger.exception("Database error while looking up booking %s", data.id)
        raise HTTPException(status_code=500, detail="Failed to update booking status")

    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    previous = booking.status
    booking.status = data.status.value
    commit_or_500(db, "update booking status")

    logger.info("Booking %s status %s -> %s", booking.id, previous, data.status.value)

    return {"message": "Booking status updated successfully."}


@app.post("/api/estimatePrice", response_model=PriceEstimate)
def estimate(data: PriceEstimateRequest):
    price = estimate_price(data.items)
    return {
        "price": float(price),
        "formatted_price": format_price(price),
        "default_estimate": float(DEFAULT_ESTIMATE),
        "base_fare": float(BASE_FARE),
        "surcharges": {name: float(amount) for name, amount in ITEM_SURCHARGES.items()},
    }


# =====================================================
# USER AUTH
# =====================================================
@app.post("/api/signup", status_code=201)
def signup(data: UserSignup, db: Session = Depends(get_db)):
    if data.password != data.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    try:
        existing = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError:
        logger.exception("Database error while registering %s", data.email)
        raise HTTPException(status_code=500, detail="Failed to register user")

    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        name=data.full_name,
        email=data.email,
        password=hash_password(data.password),
    )
    db.add(user)
    # a concurrent signup can still win the unique index
    commit_or_500(db, "register user", conflict_detail="Email already registered")

    logger.info("User registered: %s", data.email)

    return {"message": "User registered successfully"}


@app.post("/api/login")
def login(data: UserLogin, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError:
        logger.exception("Database error during login")
        raise HTTPException(status_code=500, detail="Internal server error")

    if not user:
        logger.warning("Login for unknown email %s", data.email)
        raise HTTPException(status_code=404, detail="User not found")

    if not verify_password(data.password, user.password):
        logger.warning("Wrong password for %s", data.email)
        raise HTTPException(status_code=401, detail="Invalid password")

    token = create_access_token({"sub": user.email})

    return {
        "message": "Login successful",
        "access_token": token,
        "token_type": "bearer"
    }


@app.get("/api/session", response_model=SessionUser)
def current_session(
    db: Session = Depends(get_db),
    session=Depends(get_current_session),
):
    user = db.query(User).filter(User.email == session["sub"]).first()
    if not user:
        raise HTTPException(status_code=401, detail="Session user no longer exists")

    return {"email": user.email, "name": user.name}
