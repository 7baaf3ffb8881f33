"""
Simulated email delivery.

There is no mail server: ``simulate_email_send`` waits a moment to mimic
network latency and logs the message. The ``send_*`` helpers are meant
to run as background tasks after a response has gone out, and never
let an exception escape.
"""
import logging
import time
from typing import Dict, List

import config
from schemas import Order, OrderItem, User

logger = logging.getLogger(__name__)

STORE_NAME = "SportZone"


def simulate_email_send(to: str, subject: str, content: str) -> Dict[str, object]:
    time.sleep(config.EMAIL_DELAY_SECONDS)
    logger.info("email sent", extra={"to": to, "subject": subject, "content": content})
    return {"success": True, "message_id": f"msg_{int(time.time() * 1000)}"}


def _format_amount(amount: int) -> str:
    return f"{amount:,} so'm"


def welcome_email(user: User) -> Dict[str, str]:
    subject = f"Welcome to {STORE_NAME}, {user.first_name}!"
    content = (
        f"Dear {user.first_name} {user.last_name},\n\n"
        f"Welcome to {STORE_NAME}! Your account has been created.\n\n"
        "What we offer:\n"
        "- Quality sportswear and footwear\n"
        "- Professional sports equipment\n"
        "- Fast, free delivery\n"
        "- Convenient payment (Click, Payme, Uzcard)\n\n"
        "Use promo code SPORT10 for 10% off your first purchase.\n\n"
        f"Thanks,\nThe {STORE_NAME} team\n"
    )
    return {"to": user.email, "subject": subject, "content": content}


def order_confirmation_email(order: Order, items: List[OrderItem]) -> Dict[str, str]:
    lines = "\n".join(
        f"{n}. Product ID: {item.product_id}, Quantity: {item.quantity}, Price: {_format_amount(item.price)}"
        for n, item in enumerate(items, start=1)
    )
    subject = f"{STORE_NAME} - Order confirmation #{order.id}"
    content = (
        f"Dear {order.customer_name},\n\n"
        "Your order has been received!\n\n"
        f"Order number: {order.id}\n"
        f"Total: {_format_amount(order.total_amount)}\n"
        f"Payment method: {order.payment_method}\n"
        f"Delivery address: {order.delivery_address}\n\n"
        f"Items:\n{lines}\n\n"
        "We will call you about delivery shortly.\n\n"
        f"Thanks,\nThe {STORE_NAME} team\n"
    )
    return {"to": order.customer_email, "subject": subject, "content": content}


def send_welcome_email(user: User) -> None:
    try:
        simulate_email_send(**welcome_email(user))
    except Exception:
        # registration already succeeded
        logger.exception("welcome email sending failed", extra={"user_id": user.id})


def send_order_confirmation(order: Order, items: List[OrderItem]) -> None:
    if not order.customer_email:
        return
    try:
        simulate_email_send(**order_confirmation_email(order, items))
    except Exception:
        logger.exception("order confirmation email sending failed", extra={"order_id": order.id})
