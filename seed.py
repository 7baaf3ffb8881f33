"""
Initial SportZone catalog, loaded into the store at start-up.
"""
import logging

from database import db
from schemas import Product

logger = logging.getLogger(__name__)

_UNSPLASH = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w={}&h={}"


def _thumb(photo: str) -> str:
    return _UNSPLASH.format(photo, 400, 300)


def _gallery(*photos: str):
    return [_UNSPLASH.format(p, 800, 600) for p in photos]


SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "name": "Nike Air Max",
        "description": "Premium yugurish poyabzali, qulay va zamonaviy dizayn",
        "price": 450000,
        "original_price": 600000,
        "category": "poyabzal",
        "subcategory": "yugurish",
        "image_url": _thumb("1549298916-b41d501d3772"),
        "images": _gallery("1549298916-b41d501d3772", "1460353581641-37baddab0fa2", "1551698618-1dfe5d97d256"),
        "video_url": "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "sizes": ["40", "41", "42", "43", "44"],
        "is_special_offer": True,
    },
    {
        "id": "2",
        "name": "Fitnes Rezinalari",
        "description": "Professional mashqlar uchun yuqori sifatli rezina to'plami",
        "price": 85000,
        "original_price": 120000,
        "category": "jihozlar",
        "subcategory": "fitnes",
        "image_url": _thumb("1571902943202-507ec2618e8f"),
        "images": _gallery("1571902943202-507ec2618e8f", "1517838277536-f5f99be501cd"),
        "sizes": [],
        "is_special_offer": True,
    },
    {
        "id": "3",
        "name": "Sport Ko'ylak",
        "description": "Naf oladigan, professional sport ko'ylak",
        "price": 160000,
        "original_price": 200000,
        "category": "kiyim",
        "subcategory": "ko'ylak",
        "image_url": _thumb("1583743089695-4b816a340f82"),
        "images": _gallery("1583743089695-4b816a340f82", "1434682881908-b43d0467b798", "1571019613454-1cb2f99b2d8b"),
        "video_url": "https://www.youtube.com/embed/abc123",
        "sizes": ["S", "M", "L", "XL"],
        "is_special_offer": True,
    },
    {
        "id": "4",
        "name": "Basketbol Poyabzali",
        "description": "Professional basketbol o'yini uchun maxsus poyabzal",
        "price": 520000,
        "original_price": 800000,
        "category": "poyabzal",
        "subcategory": "basketbol",
        "image_url": _thumb("1551107696-a4b0c5a0d9a2"),
        "images": _gallery(
            "1551107696-a4b0c5a0d9a2", "1542291026-7eec264c27ff",
            "1461896836934-ffe607ba8211", "1608231387042-66d1773070a5",
        ),
        "video_url": "https://www.youtube.com/embed/xyz789",
        "sizes": ["40", "41", "42", "43", "44", "45"],
        "is_special_offer": True,
    },
    {
        "id": "5",
        "name": "Sport Naushnik",
        "description": "Simsiz, suvga chidamli sport naushnik",
        "price": 250000,
        "category": "aksessuarlar",
        "subcategory": "audio",
        "image_url": _thumb("1505740420928-5e560c06d30e"),
        "images": _gallery("1505740420928-5e560c06d30e", "1484704849700-f032a568e944"),
        "sizes": [],
        "is_new_arrival": True,
    },
    {
        "id": "6",
        "name": "Yoga Matı",
        "description": "Professional yoga va fitnes uchun mat",
        "price": 120000,
        "category": "jihozlar",
        "subcategory": "yoga",
        "image_url": _thumb("1544367567-0f2fcb009e0b"),
        "images": _gallery("1544367567-0f2fcb009e0b", "1506629905531-f2c4d15ddc8e", "1518611012118-696072aa579a"),
        "video_url": "https://www.youtube.com/embed/yoga123",
        "sizes": [],
        "is_new_arrival": True,
    },
    {
        "id": "7",
        "name": "Smart Soat",
        "description": "Fitnes kuzatuv va sport rejimi bilan",
        "price": 890000,
        "category": "aksessuarlar",
        "subcategory": "texnologiya",
        "image_url": _thumb("1523275335684-37898b6baf30"),
        "images": _gallery("1523275335684-37898b6baf30", "1434494878577-86c23bcb06b9", "1441986300917-64674bd600d8"),
        "sizes": [],
        "is_new_arrival": True,
    },
    {
        "id": "8",
        "name": "Mashq Qo'lqoplari",
        "description": "Ağırlık ko'tarish va mashq uchun",
        "price": 75000,
        "category": "aksessuarlar",
        "subcategory": "mashq",
        "image_url": _thumb("1541534741688-6078c6bfb5c5"),
        "images": _gallery("1541534741688-6078c6bfb5c5", "1571019613454-1cb2f99b2d8b"),
        "sizes": ["S", "M", "L"],
        "is_new_arrival": True,
    },
    {
        "id": "9",
        "name": "Sport Suv Idishi",
        "description": "750ml sig'imli, harorat saqlovchi",
        "price": 45000,
        "category": "aksessuarlar",
        "subcategory": "hydration",
        "image_url": _thumb("1523362628745-0c100150b504"),
        "images": _gallery("1523362628745-0c100150b504", "1624969862293-b749659ccc4e", "1558618047-3c8c76ca7d13"),
        "video_url": "https://www.youtube.com/embed/hydration123",
        "sizes": [],
        "is_best_seller": True,
    },
    {
        "id": "10",
        "name": "Yugurish Shorti",
        "description": "Naf oladigan, yengil sport shorti",
        "price": 95000,
        "category": "kiyim",
        "subcategory": "short",
        "image_url": _thumb("1506629905531-f2c4d15ddc8e"),
        "images": _gallery("1506629905531-f2c4d15ddc8e", "1571019613454-1cb2f99b2d8b", "1434494878577-86c23bcb06b9"),
        "video_url": "https://www.youtube.com/embed/shorts123",
        "sizes": ["S", "M", "L", "XL"],
        "is_best_seller": True,
    },
    {
        "id": "11",
        "name": "Gantel To'plami",
        "description": "2x5kg, chidamli va professional",
        "price": 280000,
        "category": "jihozlar",
        "subcategory": "ağırlık",
        "image_url": _thumb("1571902943202-507ec2618e8f"),
        "images": _gallery(
            "1571902943202-507ec2618e8f", "1517838277536-f5f99be501cd",
            "1534438327276-14e5300c3a48", "1583454110551-21f2fa2afe61",
        ),
        "video_url": "https://www.youtube.com/embed/weights123",
        "sizes": [],
        "is_best_seller": True,
    },
]


def seed_products() -> int:
    """Load the sample catalog into an empty product collection.

    Returns the number of products inserted (0 when the catalog already
    has rows).
    """
    products = db["product"]
    with db.lock:
        if products.count() > 0:
            return 0
        for data in SAMPLE_PRODUCTS:
            products.put(Product(**data))
    logger.info("catalog seeded", extra={"products": len(SAMPLE_PRODUCTS)})
    return len(SAMPLE_PRODUCTS)
