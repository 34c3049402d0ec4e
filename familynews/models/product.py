"""
Product Model

Legacy catalogue schema kept for existing data; no route reads or writes it.
"""

from familynews.utils import utcnow

from familynews.extensions import db


class Product(db.Model):
    __tablename__ = 'products'
    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_product_price_positive'),
        db.CheckConstraint('quantity >= 0', name='ck_product_quantity_positive'),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Float, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    description = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(100), default='dates', nullable=False)
    quality = db.Column(db.String(100), default='excellent', nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<Product {self.name}>'
