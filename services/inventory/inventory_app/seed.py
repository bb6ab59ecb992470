"""
Sample inventory data loaded at startup when SEED_SAMPLE_DATA=true.
"""
import logging
from datetime import date, timedelta
from sqlalchemy.orm import Session
from . import models

logger = logging.getLogger(__name__)

# product_id, name, [(batch_id, quantity, months until expiry)]
SAMPLE_PRODUCTS = [
    ("WHEAT-001", "Wheat", [("WHEAT-B001", 1000, 6), ("WHEAT-B002", 500, 9)]),
    ("RICE-001", "Rice", [("RICE-B001", 2000, 12), ("RICE-B002", 1500, 8)]),
    ("SUGAR-001", "Sugar", [("SUGAR-B001", 3000, 18)]),
]


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length."""
    month_index = start.month - 1 + months
    year, month = start.year + month_index // 12, month_index % 12 + 1
    next_month = date(year + month // 12, month % 12 + 1, 1)
    last_day = (next_month - timedelta(days=1)).day
    return date(year, month, min(start.day, last_day))


def seed_sample_data(db: Session, today: date = None) -> int:
    """
    Insert the sample products and batches, skipping products that already exist.

    Returns:
        Number of products created
    """
    today = today or date.today()
    created = 0
    logger.info("Initializing sample inventory data...")

    for product_id, name, batches in SAMPLE_PRODUCTS:
        if db.query(models.Product).filter(models.Product.product_id == product_id).first():
            logger.info(f"Sample product {product_id} already present, skipping")
            continue
        product = models.Product(product_id=product_id, name=name)
        for batch_id, quantity, months in batches:
            product.batches.append(models.Batch(
                batch_id=batch_id,
                quantity=quantity,
                expiry_date=add_months(today, months),
            ))
        db.add(product)
        created += 1
        logger.info(f"Created product {product_id} with {len(batches)} batches")

    db.commit()
    logger.info("Sample inventory data initialization completed")
    return created
