from .. import db
from datetime import datetime


class Customer(db.Model):
    __tablename__ = 'customers'

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), default='')
    phone = db.Column(db.String(30), default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Repairs and donations keep their own customer_id/customer_name copy,
    # so deleting a customer leaves them in place.

    def to_dict(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'email': self.email or '',
            'phone': self.phone or '',
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Customer {self.full_name}>'
