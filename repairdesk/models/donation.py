from .. import db
from datetime import datetime


class Donation(db.Model):
    __tablename__ = 'donations'

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, index=True)
    customer_name = db.Column(db.String(120), nullable=False)
    device_type = db.Column(db.String(50), nullable=False)
    brand = db.Column(db.String(50), nullable=False)
    model = db.Column(db.String(100), nullable=False)
    notes = db.Column(db.Text, default='')
    donated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    received_by = db.Column(db.String(120))  # email of the recording admin

    def to_dict(self):
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'customerName': self.customer_name,
            'deviceType': self.device_type,
            'brand': self.brand,
            'model': self.model,
            'notes': self.notes or '',
            'donatedAt': self.donated_at.isoformat() if self.donated_at else None,
            'receivedBy': self.received_by or '',
        }
