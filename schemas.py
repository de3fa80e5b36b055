from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import BookingStatus


# -------------------
# ITEMS
# -------------------
class BookingItems(BaseModel):
    """Furniture categories included in a move.

    Wire and storage names are camelCase; unknown keys are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sofa_set: bool = Field(False, alias="sofaSet")
    bed: bool = Field(False, alias="bed")
    dining_table: bool = Field(False, alias="diningTable")
    wardrobe: bool = Field(False, alias="wardrobe")
    other_furniture: bool = Field(False, alias="otherFurniture")

    @field_validator("*", mode="before")
    @classmethod
    def null_is_unselected(cls, value):
        return False if value is None else value

    def selected(self):
        return [name for name, flag in self.model_dump(by_alias=True).items() if flag]


# -------------------
# BOOKING (FRONTEND)
# -------------------
class BookingCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", min_length=1)
    phone_number: str = Field(..., alias="phoneNumber", min_length=1)
    pickup_location: str = Field(..., alias="pickupLocation", min_length=1)
    dropoff_location: str = Field(..., alias="dropoffLocation", min_length=1)
    moving_date: str = Field(..., alias="movingDate", min_length=1)
    items: BookingItems = Field(default_factory=BookingItems)
    # recomputed on the server, kept so older clients can still send it
    price: Decimal | None = None


class BookingOut(BaseModel):
    id: int
    customer_name: str
    phone_number: str
    pickup_location: str
    dropoff_location: str
    moving_date: str
    items: dict[str, bool]
    price: float
    status: BookingStatus
    actions: list[BookingStatus]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PriceEstimateRequest(BaseModel):
    items: BookingItems = Field(default_factory=BookingItems)


class PriceEstimate(BaseModel):
    price: float
    formatted_price: str
    default_estimate: float
    base_fare: float
    surcharges: dict[str, float]


# -------------------
# BOOKING STATUS
# -------------------
class BookingStatusUpdate(BaseModel):
    id: int
    status: BookingStatus


# -------------------
# USER AUTH
# -------------------
class UserSignup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., alias="confirmPassword")


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionUser(BaseModel):
    email: str
    name: str
