"""Editable static menu, storage and image configuration."""

from __future__ import annotations

MENU_ITEMS_KEY = "menu_items"
TRANSACTIONS_KEY = "transactions"
INVOICE_COUNTER_KEY = "invoice_counter"

FIRST_INVOICE_NUMBER = 1

# Canonical sample dish values consumed by billing.data (which wraps these into MenuItem instances).
SAMPLE_MENU_BY_ID: dict[str, dict[str, str]] = {
    "1": {
        "name": "Idly",
        "price": "30.00",
        "image_ref": "https://i0.wp.com/www.chitrasfoodbook.com/wp-content/uploads/2018/12/Instant-Suji-idli.jpg",
    },
    "2": {
        "name": "Dosa",
        "price": "15.00",
        "image_ref": "https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcR1H8Mu-pfh7Rb3kFFqkAs9BGl3KstjAFkb4A&s",
    },
    "3": {
        "name": "Vada",
        "price": "20.00",
        "image_ref": "https://www.awesomecuisine.com/wp-content/uploads/2014/12/medhu-vadai.jpg",
    },
    "4": {
        "name": "Omelette",
        "price": "15.00",
        "image_ref": "https://www.healthyfood.com/wp-content/uploads/2018/02/Basic-omelette.jpg",
    },
    "5": {
        "name": "Chutney",
        "price": "15.00",
        "image_ref": "https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcR1H8Mu-pfh7Rb3kFFqkAs9BGl3KstjAFkb4A&s",
    },
    "6": {
        "name": "Coffee",
        "price": "20.00",
        "image_ref": "https://encrypted-tbn0.gstatic.com/images?q=tbn:ANd9GcR1H8Mu-pfh7Rb3kFFqkAs9BGl3KstjAFkb4A&s",
    },
}

PLACEHOLDER_IMAGE_REF = "placeholder:food-item"

# Payment QR lookup order, relative to the QR search directory.
QR_IMAGE_CANDIDATES: tuple[str, ...] = (
    "QR.jpeg",
    "QR.jpg",
    "QR.png",
    "QR.webp",
    "qr.jpeg",
    "qr.jpg",
    "qr.png",
    "qr.webp",
    "qr code.jpeg",
    "qr code.jpg",
    "qr code.png",
    "qr code.webp",
    "QR/QR.jpeg",
    "QR/QR.jpg",
    "QR/QR.png",
    "QR/QR.webp",
    "QR/qr.jpeg",
    "QR/qr.jpg",
    "QR/qr.png",
    "QR/qr.webp",
    "QR/qr code.jpeg",
    "QR/qr code.jpg",
    "QR/qr code.png",
    "QR/qr code.webp",
)

REPORT_FILTER_LABELS: dict[str, str] = {
    "today": "Today",
    "week": "Last 7 days",
    "month": "Last month",
    "custom": "Custom range",
}
