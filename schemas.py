"""
Schemas for the SportZone storefront

Entity models are what the in-memory store keeps; each one maps to a
collection in database.py (collection name is the lowercase of the
class name with underscores):

- User -> "user"
- Product -> "product"
- CartItem -> "cart_item"
- Order -> "order"
- OrderItem -> "order_item"

The *Create / *Update models validate request bodies before anything
reaches a service. Prices are integers in so'm.
"""
import math
import re
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, StringConstraints, computed_field, field_validator

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
PaymentMethod = Literal["click", "payme", "cash", "uzcard"]

PHONE_RE = re.compile(r"^(\+998|998)?[0-9]{9}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_discount(price: int, original_price: Optional[int]) -> int:
    """Percent off the original price, rounded half up like the storefront UI."""
    if not original_price:
        return 0
    return int(math.floor((original_price - price) / original_price * 100 + 0.5))


# Entities

class User(BaseModel):
    id: str
    username: str = Field(..., description="Unique login name")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., description="bcrypt hash, never the plaintext")
    first_name: str
    last_name: str
    phone: Optional[str] = None
    is_admin: bool = False


class UserPublic(BaseModel):
    id: str
    username: str
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(**user.model_dump(exclude={"password"}))


class Product(BaseModel):
    id: str
    name: str = Field(..., description="Product name")
    description: str = Field(..., description="Product description")
    price: int = Field(..., ge=0, description="Price in so'm")
    original_price: Optional[int] = Field(None, ge=0, description="Pre-discount price in so'm")
    category: str = Field(..., description="Product category")
    subcategory: Optional[str] = None
    image_url: str = Field(..., description="Primary image URL")
    images: Optional[List[str]] = None
    video_url: Optional[str] = None
    sizes: Optional[List[str]] = None
    in_stock: bool = True
    is_special_offer: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def discount_percentage(self) -> int:
        return compute_discount(self.price, self.original_price)


class CartItem(BaseModel):
    id: str
    session_id: str = Field(..., description="Opaque client-generated cart id")
    product_id: str
    quantity: int = Field(1, ge=1)
    size: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class CartItemWithProduct(CartItem):
    product: Product


class Order(BaseModel):
    id: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[EmailStr] = None
    delivery_address: str
    payment_method: PaymentMethod
    total_amount: int = Field(..., ge=0)
    status: str = Field("pending", description="Order status")
    created_at: datetime = Field(default_factory=utcnow)


class OrderItem(BaseModel):
    id: str
    order_id: str
    product_id: str
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    price: int = Field(..., ge=0, description="Unit price captured at order time")


# Request bodies

class ProductCreate(BaseModel):
    name: NonBlank
    description: str
    price: int = Field(..., ge=0)
    original_price: Optional[int] = Field(None, ge=0)
    category: NonBlank
    subcategory: Optional[str] = None
    image_url: str
    images: Optional[List[str]] = None
    video_url: Optional[str] = None
    sizes: Optional[List[str]] = None
    in_stock: bool = True
    is_special_offer: bool = False
    is_best_seller: bool = False
    is_new_arrival: bool = False


class CartItemCreate(BaseModel):
    session_id: NonBlank
    product_id: NonBlank
    quantity: int = Field(1, ge=1, strict=True)
    size: Optional[str] = None


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, strict=True)


class OrderCreate(BaseModel):
    customer_name: NonBlank
    customer_phone: NonBlank
    customer_email: Optional[EmailStr] = None
    delivery_address: NonBlank
    payment_method: PaymentMethod
    total_amount: int = Field(..., ge=0)

    @field_validator("customer_phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not PHONE_RE.match(re.sub(r"\s", "", v)):
            raise ValueError("invalid phone number format")
        return v

    @field_validator("customer_email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class OrderItemCreate(BaseModel):
    product_id: NonBlank
    quantity: int = Field(..., ge=1, strict=True)
    size: Optional[str] = None
    price: int = Field(..., ge=0, strict=True)


class OrderRequest(BaseModel):
    order: OrderCreate
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderWithItems(BaseModel):
    order: Order
    items: List[OrderItem]


class UserCreate(BaseModel):
    username: NonBlank
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: NonBlank
    last_name: NonBlank
    phone: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str
