from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Lookup ids, seeded at startup
ROLE_ADMIN = 1
ROLE_SELLER = 2
ROLE_CUSTOMER = 3
ROLES = {ROLE_ADMIN: "admin", ROLE_SELLER: "seller", ROLE_CUSTOMER: "customer"}

ORDER_PENDING = 1
ORDER_PAID = 2
ORDER_SHIPPED = 3
ORDER_DELIVERED = 4
ORDER_CANCELLED = 5
ORDER_STATUSES = {
    ORDER_PENDING: "PENDING",
    ORDER_PAID: "PAID",
    ORDER_SHIPPED: "SHIPPED",
    ORDER_DELIVERED: "DELIVERED",
    ORDER_CANCELLED: "CANCELLED",
}

PAYMENT_COMPLETED = 1
PAYMENT_PENDING = 2
PAYMENT_FAILED = 3
PAYMENT_STATUSES = {PAYMENT_COMPLETED: "COMPLETED", PAYMENT_PENDING: "PENDING", PAYMENT_FAILED: "FAILED"}

REQUEST_PENDING = 1
REQUEST_APPROVED = 2
REQUEST_REJECTED = 3
SELLER_REQUEST_STATUSES = {REQUEST_PENDING: "PENDING", REQUEST_APPROVED: "APPROVED", REQUEST_REJECTED: "REJECTED"}


class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    phone = Column(String(20))
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, default=ROLE_CUSTOMER)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    role = relationship("Role")
    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan")
    addresses = relationship("Address", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user", passive_deletes=True)

    @property
    def role_name(self):
        return ROLES.get(self.role_id)


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    ebooks = relationship("Ebook", back_populates="category")


class Ebook(Base):
    __tablename__ = "ebooks"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, default=0)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"))
    creator_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    category = relationship("Category", back_populates="ebooks")

    @property
    def category_name(self):
        return self.category.name if self.category else None


class CartItem(Base):
    __tablename__ = "cart_items"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    ebook_id = Column(Integer, ForeignKey("ebooks.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())
    user = relationship("User", back_populates="cart_items")
    ebook = relationship("Ebook")

    @property
    def ebook_name(self):
        return self.ebook.name if self.ebook else None


class Address(Base):
    __tablename__ = "addresses"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    street = Column(String(200), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    user = relationship("User", back_populates="addresses")


class OrderStatus(Base):
    __tablename__ = "order_statuses"
    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"))
    total = Column(Numeric(10, 2), nullable=False)
    status_id = Column(Integer, ForeignKey("order_statuses.id"), nullable=False, default=ORDER_PENDING)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    @property
    def status(self):
        return ORDER_STATUSES.get(self.status_id)


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("ebooks.id", ondelete="SET NULL"))
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    order = relationship("Order", back_populates="items")


class PaymentStatus(Base):
    __tablename__ = "payment_statuses"
    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)


class Payment(Base):
    __tablename__ = "payments"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    method = Column(String(50), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status_id = Column(Integer, ForeignKey("payment_statuses.id"), nullable=False, default=PAYMENT_PENDING)
    paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    order = relationship("Order")

    @property
    def status(self):
        return PAYMENT_STATUSES.get(self.status_id)


class Invoice(Base):
    __tablename__ = "invoices"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    issued_at = Column(DateTime(timezone=True), server_default=func.now())


class SellerRequestStatus(Base):
    __tablename__ = "seller_request_statuses"
    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)


class SellerRequest(Base):
    __tablename__ = "seller_requests"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    business_name = Column(String(150), nullable=False)
    document_id = Column(String(50), nullable=False)
    description = Column(Text)
    status_id = Column(Integer, ForeignKey("seller_request_statuses.id"), nullable=False, default=REQUEST_PENDING)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def status(self):
        return SELLER_REQUEST_STATUSES.get(self.status_id)


LOOKUP_TABLES = (
    (Role, ROLES),
    (OrderStatus, ORDER_STATUSES),
    (PaymentStatus, PAYMENT_STATUSES),
    (SellerRequestStatus, SELLER_REQUEST_STATUSES),
)


def seed_lookups(db):
    """Insert the fixed lookup rows that are not there yet."""
    for model, rows in LOOKUP_TABLES:
        existing = {row.id for row in db.query(model).all()}
        for row_id, name in rows.items():
            if row_id not in existing:
                db.add(model(id=row_id, name=name))
    db.commit()
