import uuid
from datetime import datetime, timezone

from jewelry_catalog import db
from jewelry_catalog.models.category import FALLBACK_IMAGE, split_image_urls


class JewelryItem(db.Model):
    __tablename__ = "jewelry_items"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    # Matched against Category.name, not Category.id
    category = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    weight_grams = db.Column(db.Float, nullable=True)
    price = db.Column(db.Float, nullable=True)
    image_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    @property
    def cover_image(self):
        urls = split_image_urls(self.image_url)
        return urls[0] if urls else FALLBACK_IMAGE

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "weight_grams": self.weight_grams,
            "price": self.price,
            "image_url": self.image_url,
        }

    def __repr__(self):
        return f"<JewelryItem {self.name}>"
