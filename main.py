import logging
from typing import List, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
import logging_config
from database import db
from errors import DataIntegrityError, StorefrontError, ValidationError
from notifications import send_order_confirmation, send_welcome_email
from schemas import (
    CartItem,
    CartItemCreate,
    CartItemUpdate,
    CartItemWithProduct,
    Order,
    OrderItem,
    OrderRequest,
    OrderWithItems,
    Product,
    ProductCreate,
    UserCreate,
    UserLogin,
    UserPublic,
)
from seed import seed_products
from services import CartService, CatalogService, OrderService, UserService

logging_config.configure_logging(level=config.LOG_LEVEL, log_dir=config.LOG_DIR)
logger = logging.getLogger(__name__)

app = FastAPI(title=config.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

catalog = CatalogService(db)
cart = CartService(db)
orders = OrderService(db)
users = UserService(db)

if config.SEED_CATALOG:
    seed_products()


# Error mapping
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if isinstance(exc, DataIntegrityError):
        logger.error("data integrity failure", extra={"path": request.url.path, "error": exc.message})
        return JSONResponse(status_code=500, content={"detail": "Internal data error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# Health
@app.get("/")
def read_root():
    return {"message": "SportZone E-commerce Backend running"}


@app.get("/test")
def test_database():
    collections = {name: db[name].count() for name in db.list_collection_names()}
    return {"backend": "ok", "db": "in-memory", "collections": collections}


# Products
@app.get("/api/products", response_model=List[Product])
def list_products():
    return catalog.get_all()


@app.get("/api/products/search", response_model=List[Product])
def search_products(q: Optional[str] = Query(None)):
    if not q or not q.strip():
        raise ValidationError("Search query is required")
    return catalog.search(q)


@app.get("/api/products/special/offers", response_model=List[Product])
def special_offers():
    return catalog.get_special_offers()


@app.get("/api/products/special/bestsellers", response_model=List[Product])
def best_sellers():
    return catalog.get_best_sellers()


@app.get("/api/products/special/newarrivals", response_model=List[Product])
def new_arrivals():
    return catalog.get_new_arrivals()


@app.get("/api/products/category/{category}", response_model=List[Product])
def products_by_category(category: str):
    return catalog.get_by_category(category)


@app.get("/api/products/{product_id}", response_model=Product)
def get_product(product_id: str):
    product = catalog.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.post("/api/products", response_model=Product, status_code=201)
def create_product(p: ProductCreate):
    return catalog.create(p)


# Cart
@app.get("/api/cart/{session_id}", response_model=List[CartItemWithProduct])
def get_cart(session_id: str):
    return cart.get_items(session_id)


@app.post("/api/cart", response_model=CartItem, status_code=201)
def add_to_cart(payload: CartItemCreate):
    return cart.add_item(payload.session_id, payload.product_id, payload.quantity, payload.size)


@app.put("/api/cart/{cart_item_id}", response_model=CartItem)
def update_cart_item(cart_item_id: str, payload: CartItemUpdate):
    item = cart.update_quantity(cart_item_id, payload.quantity)
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return item


@app.delete("/api/cart/session/{session_id}")
def clear_cart(session_id: str):
    cart.clear(session_id)
    return {"message": "Cart cleared successfully"}


@app.delete("/api/cart/{cart_item_id}")
def remove_cart_item(cart_item_id: str):
    if not cart.remove_item(cart_item_id):
        raise HTTPException(status_code=404, detail="Cart item not found")
    return {"message": "Cart item removed successfully"}


# Auth
@app.post("/api/auth/register", status_code=201)
def register(user: UserCreate, background_tasks: BackgroundTasks):
    created = users.register(user)
    background_tasks.add_task(send_welcome_email, created)
    return {"user": UserPublic.from_user(created)}


@app.post("/api/auth/login")
def login(creds: UserLogin):
    user = users.authenticate(creds.email, creds.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return {"user": UserPublic.from_user(user)}


@app.get("/api/user/{user_id}", response_model=UserPublic)
def get_user(user_id: str):
    user = users.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserPublic.from_user(user)


# Orders
@app.post("/api/orders", response_model=OrderWithItems, status_code=201)
def create_order(req: OrderRequest, background_tasks: BackgroundTasks):
    order, items = orders.place_order(req.order, req.items)
    background_tasks.add_task(send_order_confirmation, order, items)
    return OrderWithItems(order=order, items=items)


@app.get("/api/orders/{order_id}", response_model=Order)
def get_order(order_id: str):
    order = orders.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@app.get("/api/orders/{order_id}/items", response_model=List[OrderItem])
def get_order_items(order_id: str):
    if not orders.get_order(order_id):
        raise HTTPException(status_code=404, detail="Order not found")
    return orders.get_order_items(order_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
