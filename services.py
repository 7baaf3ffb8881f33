"""
Catalog, cart, order and user operations over the entity store.

Each public method runs under the store lock, so a call is atomic with
respect to every other service call.
"""
import logging
from typing import List, Optional, Tuple

from database import Database, db
from errors import ConflictError, DataIntegrityError, NotFoundError, ValidationError
from schemas import (
    CartItem,
    CartItemWithProduct,
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    Product,
    ProductCreate,
    User,
    UserCreate,
)
from security import hash_password, verify_password

logger = logging.getLogger(__name__)


def _check_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Invalid quantity")


class CatalogService:
    """Read-only product queries, plus product creation."""

    def __init__(self, database: Database = db):
        self.products = database["product"]

    def get_all(self) -> List[Product]:
        return self.products.list_all()

    def get_by_id(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    def get_by_category(self, category: str) -> List[Product]:
        return self.products.find(lambda p: p.category == category)

    def get_special_offers(self) -> List[Product]:
        return self.products.find(lambda p: p.is_special_offer)

    def get_best_sellers(self) -> List[Product]:
        return self.products.find(lambda p: p.is_best_seller)

    def get_new_arrivals(self) -> List[Product]:
        return self.products.find(lambda p: p.is_new_arrival)

    def search(self, query: str) -> List[Product]:
        """Case-insensitive substring match on name, description or category."""
        q = query.lower()
        return self.products.find(
            lambda p: q in p.name.lower() or q in p.description.lower() or q in p.category.lower()
        )

    def create(self, data: ProductCreate) -> Product:
        product = Product(id=self.products.new_id(), **data.model_dump())
        product = self.products.put(product)
        logger.info("product created", extra={"product_id": product.id})
        return product


class CartService:
    def __init__(self, database: Database = db):
        self.db = database
        self.cart_items = database["cart_item"]
        self.products = database["product"]

    def get_items(self, session_id: str) -> List[CartItemWithProduct]:
        """Cart rows of a session, each with its product embedded.

        Raises:
            DataIntegrityError: a row points at a product that is no
                longer in the catalog.
        """
        with self.db.lock:
            rows = self.cart_items.find(lambda i: i.session_id == session_id)
            result = []
            for item in rows:
                product = self.products.get(item.product_id)
                if product is None:
                    logger.error(
                        "cart item references missing product",
                        extra={"session_id": session_id, "cart_item_id": item.id, "product_id": item.product_id},
                    )
                    raise DataIntegrityError(f"Product not found: {item.product_id}")
                result.append(CartItemWithProduct(**item.model_dump(), product=product))
            return result

    def add_item(self, session_id: str, product_id: str, quantity: int = 1, size: Optional[str] = None) -> CartItem:
        # always a new row, even for a (session, product, size) already in the cart
        _check_quantity(quantity)
        with self.db.lock:
            if product_id not in self.products:
                raise NotFoundError("Product not found")
            item = CartItem(
                id=self.cart_items.new_id(),
                session_id=session_id,
                product_id=product_id,
                quantity=quantity,
                size=size,
            )
            item = self.cart_items.put(item)
        logger.info("cart item added", extra={"session_id": session_id, "cart_item_id": item.id, "product_id": product_id})
        return item

    def update_quantity(self, cart_item_id: str, quantity: int) -> Optional[CartItem]:
        _check_quantity(quantity)
        with self.db.lock:
            item = self.cart_items.get(cart_item_id)
            if item is None:
                return None
            return self.cart_items.put(item.model_copy(update={"quantity": quantity}))

    def remove_item(self, cart_item_id: str) -> bool:
        return self.cart_items.delete(cart_item_id)

    def clear(self, session_id: str) -> None:
        with self.db.lock:
            rows = self.cart_items.find(lambda i: i.session_id == session_id)
            for item in rows:
                self.cart_items.delete(item.id)
        logger.info("cart cleared", extra={"session_id": session_id, "removed": len(rows)})


class OrderService:
    def __init__(self, database: Database = db):
        self.db = database
        self.orders = database["order"]
        self.order_items = database["order_item"]
        self.products = database["product"]

    def _new_order(self, data: OrderCreate) -> Order:
        return Order(id=self.orders.new_id(), status="pending", **data.model_dump())

    def _new_item(self, order_id: str, product_id: str, quantity: int, price: int, size: Optional[str]) -> OrderItem:
        return OrderItem(
            id=self.order_items.new_id(),
            order_id=order_id,
            product_id=product_id,
            quantity=quantity,
            size=size,
            price=price,
        )

    def create_order(self, data: OrderCreate) -> Order:
        order = self.orders.put(self._new_order(data))
        logger.info("order created", extra={"order_id": order.id})
        return order

    def create_order_item(self, order_id: str, product_id: str, quantity: int, price: int, size: Optional[str] = None) -> OrderItem:
        # price is stored as given, never looked up from the catalog
        _check_quantity(quantity)
        with self.db.lock:
            if order_id not in self.orders:
                raise NotFoundError("Order not found")
            return self.order_items.put(self._new_item(order_id, product_id, quantity, price, size))

    def get_order(self, order_id: str) -> Optional[Order]:
        return self.orders.get(order_id)

    def get_order_items(self, order_id: str) -> List[OrderItem]:
        return self.order_items.find(lambda i: i.order_id == order_id)

    def place_order(self, data: OrderCreate, items: List[OrderItemCreate]) -> Tuple[Order, List[OrderItem]]:
        """Create an order and all of its items as one unit.

        Every line is checked before anything is written; the order and
        its items are then committed under a single hold of the store
        lock, so readers see either none of them or all of them.
        """
        with self.db.lock:
            for line in items:
                if line.product_id not in self.products:
                    raise NotFoundError(f"Product not found: {line.product_id}")
            order = self._new_order(data)
            order_items = [
                self._new_item(order.id, line.product_id, line.quantity, line.price, line.size)
                for line in items
            ]
            self.orders.put(order)
            for order_item in order_items:
                self.order_items.put(order_item)
        logger.info("order placed", extra={"order_id": order.id, "items": len(order_items), "total_amount": order.total_amount})
        return order, order_items


class UserService:
    def __init__(self, database: Database = db):
        self.db = database
        self.users = database["user"]

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self.users.find_one(lambda u: u.username == username)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return self.users.find_one(lambda u: u.email.lower() == email)

    def register(self, data: UserCreate) -> User:
        password_hash = hash_password(data.password)
        with self.db.lock:
            if self.get_by_email(data.email):
                raise ConflictError("A user with this email already exists")
            if self.get_by_username(data.username):
                raise ConflictError("A user with this username already exists")
            user = User(id=self.users.new_id(), password=password_hash, **data.model_dump(exclude={"password"}))
            user = self.users.put(user)
        logger.info("user registered", extra={"user_id": user.id})
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            return None
        return user
