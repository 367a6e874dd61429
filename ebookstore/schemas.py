import re
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

NAME_RE = re.compile(r"^[a-zA-ZñÑáéíóúÁÉÍÓÚüÜ\s]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$")


def _check_name(value):
    value = value.strip()
    if not 2 <= len(value) <= 100:
        raise ValueError("name must be between 2 and 100 characters")
    if not NAME_RE.match(value):
        raise ValueError("name can only contain letters and spaces")
    return value


def _check_phone(value):
    value = value.strip()
    if not PHONE_RE.match(value):
        raise ValueError("Please provide a valid phone number")
    return value


def _check_password(value):
    if not 8 <= len(value) <= 128:
        raise ValueError("Password must be between 8 and 128 characters")
    if not PASSWORD_RE.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one number, and one special character"
        )
    return value


def _normalize_email(value):
    if len(value) > 100:
        raise ValueError("Email must not exceed 100 characters")
    return value.lower()


PersonName = Annotated[str, AfterValidator(_check_name)]
Phone = Annotated[str, AfterValidator(_check_phone)]
Password = Annotated[str, AfterValidator(_check_password)]
LowerEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]


# --- User ---
class UserRegister(BaseModel):
    name: PersonName
    email: LowerEmail
    password: Password
    phone: Optional[Phone] = None


class UserLogin(BaseModel):
    email: LowerEmail
    password: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    name: Optional[PersonName] = None
    phone: Optional[Phone] = None


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: Password
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value, info: ValidationInfo):
        new_password = info.data.get("new_password")
        if new_password is not None and value != new_password:
            raise ValueError("Password confirmation does not match new password")
        return value


class UserAdminCreate(UserRegister):
    role_id: int = 3


class UserAdminUpdate(BaseModel):
    name: Optional[PersonName] = None
    phone: Optional[Phone] = None
    role_id: Optional[int] = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role_id: int
    role: Optional[str] = Field(default=None, validation_alias="role_name")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Category ---
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# --- Ebook ---
class EbookCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    category_id: Optional[int] = None


class EbookUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[int] = None


class EbookOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    stock: Optional[int] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    creator_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Cart ---
class CartItemCreate(BaseModel):
    ebook_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(ge=1)


class CartItemOut(BaseModel):
    id: int
    ebook_id: int
    ebook_name: Optional[str] = None
    quantity: int
    price: float
    added_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Address ---
class AddressCreate(BaseModel):
    street: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)
    country: str = Field(min_length=1, max_length=100)
    is_default: bool = False


class AddressUpdate(BaseModel):
    street: Optional[str] = Field(default=None, min_length=1, max_length=200)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, min_length=1, max_length=100)
    postal_code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    country: Optional[str] = Field(default=None, min_length=1, max_length=100)
    is_default: Optional[bool] = None


class AddressOut(BaseModel):
    id: int
    user_id: int
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


# --- Order ---
class OrderCreate(BaseModel):
    address_id: int


class OrderStatusUpdate(BaseModel):
    status_id: int


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: Optional[int] = None
    quantity: int
    price: float

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    address_id: Optional[int] = None
    total: float
    status_id: int
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


# --- Payment ---
class PaymentCreate(BaseModel):
    order_id: int
    method: str = Field(min_length=1, max_length=50)


class PaymentStatusUpdate(BaseModel):
    status_id: int


class PaymentOut(BaseModel):
    id: int
    order_id: int
    method: str
    amount: float
    status_id: int
    status: Optional[str] = None
    paid_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Invoice ---
class InvoiceCreate(BaseModel):
    order_id: int


class InvoiceOut(BaseModel):
    id: int
    order_id: int
    user_id: int
    total: float
    issued_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Seller request ---
class SellerRequestCreate(BaseModel):
    business_name: str = Field(min_length=2, max_length=150)
    document_id: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None


class SellerRequestStatusUpdate(BaseModel):
    status_id: int


class SellerRequestOut(BaseModel):
    id: int
    user_id: int
    business_name: str
    document_id: str
    description: Optional[str] = None
    status_id: int
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
