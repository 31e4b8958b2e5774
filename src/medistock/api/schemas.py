"""Pydantic request/response schemas for the MediStock API.

Wire names are camelCase (``rackNo``, ``phoneNumber``...). Every schema also
accepts the snake_case field names.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

# --- Shared ---


class AddressIn(BaseModel):
    model_config = {"populate_by_name": True}

    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, alias="zipCode", max_length=20)
    country: str | None = Field(None, max_length=100)


class MessageResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"msg": "Product removed"}]}}

    msg: str


# --- Auth ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "nurse.joy",
                    "email": "joy@example.com",
                    "password": "s3cure-pass",
                }
            ]
        }
    }

    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=255)
    # Accepted for client compatibility; self-registration always creates a "user"
    role: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    token: str
    user: dict


class ProfileUpdateRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "phoneNumber": "+1-555-0100",
                    "address": {"street": "12 Harbour Rd", "city": "Springfield"},
                }
            ]
        },
    }

    username: str | None = Field(None, max_length=50)
    phone_number: str | None = Field(None, alias="phoneNumber", max_length=30)
    avatar: str | None = Field(None, max_length=500)
    address: AddressIn | None = None


class ChangePasswordRequest(BaseModel):
    model_config = {"populate_by_name": True}

    current_password: str | None = Field(None, alias="currentPassword")
    new_password: str | None = Field(None, alias="newPassword")


# --- Users (admin) ---


class UserUpdateRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"role": "admin"}]},
    }

    username: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=254)
    role: str | None = None
    phone_number: str | None = Field(None, alias="phoneNumber", max_length=30)
    address: AddressIn | None = None


class ResetPasswordRequest(BaseModel):
    model_config = {"populate_by_name": True}

    new_password: str | None = Field(None, alias="newPassword")


# --- Products ---


class CreateProductRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Paracetamol 500mg",
                    "description": "Pain reliever and fever reducer, strip of 10 tablets",
                    "category": "Analgesics",
                    "price": 2.5,
                    "stock": 120,
                    "manufacturer": "Cipla",
                    "rackNo": "A1",
                    "expiryDate": "2026-12-31",
                }
            ]
        },
    }

    name: str = Field(..., max_length=255)
    description: str
    category: str = Field(..., max_length=100)
    price: float = Field(..., ge=0)
    stock: int | None = Field(None, ge=0)
    manufacturer: str = Field(..., max_length=255)
    rack_no: str | None = Field(None, alias="rackNo", max_length=50)
    expiry_date: date | None = Field(None, alias="expiryDate")


class UpdateProductRequest(BaseModel):
    """Every field is optional; only the fields sent are changed."""

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"stock": 0}, {"price": 3.1, "rackNo": "B4"}]},
    }

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    manufacturer: str | None = Field(None, max_length=255)
    rack_no: str | None = Field(None, alias="rackNo", max_length=50)
    expiry_date: date | None = Field(None, alias="expiryDate")


# --- Orders ---


class OrderLineIn(BaseModel):
    model_config = {"populate_by_name": True}

    product_id: str = Field(..., alias="product", min_length=1)
    quantity: int


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product": "b2c3d4e5-f6a7-8901-bcde-f12345678901", "quantity": 2},
                    ]
                }
            ]
        }
    }

    items: list[OrderLineIn] = Field(default_factory=list)


class OrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "processing"}]}}

    status: str
