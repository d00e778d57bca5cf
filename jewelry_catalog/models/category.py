import uuid

from jewelry_catalog import db

FALLBACK_IMAGE = "https://images.pexels.com/photos/265856/pexels-photo-265856.jpeg"


def split_image_urls(image_url):
    """Trimmed, non-empty segments of a comma-separated image list."""
    if not image_url:
        return []
    return [url.strip() for url in image_url.split(",") if url.strip()]


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.Text, nullable=True)
    # Plain reference, no FK: deletion is guarded in the admin UI only
    parent_id = db.Column(db.String(36), nullable=True, index=True)

    @property
    def image_urls(self):
        return split_image_urls(self.image_url)

    @property
    def image_count(self):
        return len(self.image_urls)

    @property
    def cover_image(self):
        urls = self.image_urls
        return urls[0] if urls else FALLBACK_IMAGE

    @property
    def is_top_level(self):
        return not self.parent_id

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "parent_id": self.parent_id,
        }

    def __repr__(self):
        return f"<Category {self.name}>"
