# repairdesk/models/repair.py
from .. import db
from ..utils.lifecycle import RepairStatus
from datetime import datetime
import secrets


def generate_public_token():
    return secrets.token_urlsafe(16)


class Repair(db.Model):
    __tablename__ = 'repairs'

    id = db.Column(db.Integer, primary_key=True)
    public_token = db.Column(db.String(64), unique=True, nullable=False, default=generate_public_token)

    # Denormalised copy of the customer at intake time
    customer_id = db.Column(db.Integer, index=True)
    customer_name = db.Column(db.String(120), nullable=False)

    device_type = db.Column(db.String(50), nullable=False)  # Computer, Phone, Tablet, Console, Other
    brand = db.Column(db.String(50), nullable=False)
    model = db.Column(db.String(100), nullable=False)
    problem_notes = db.Column(db.Text, nullable=False)
    password_pin = db.Column(db.String(100))
    accessories = db.Column(db.JSON, default=list)
    signature = db.Column(db.Text)

    status = db.Column(db.String(20), nullable=False, default=RepairStatus.PENDING.value)
    assigned_to_name = db.Column(db.String(120), default='')
    technician_id = db.Column(db.Integer, db.ForeignKey('technicians.id'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    ready_at = db.Column(db.DateTime)
    archived_at = db.Column(db.DateTime)

    @property
    def ticket_number(self):
        return f'RD-{self.id:06d}' if self.id else 'RD-NEW'

    @property
    def is_archived(self):
        return self.status == RepairStatus.ARCHIVED.value

    def to_dict(self):
        return {
            'id': self.id,
            'ticketNumber': self.ticket_number,
            'customerId': self.customer_id,
            'customerName': self.customer_name,
            'deviceType': self.device_type,
            'brand': self.brand,
            'model': self.model,
            'problemNotes': self.problem_notes,
            'passwordPin': self.password_pin or '',
            'accessories': list(self.accessories or []),
            'status': self.status,
            'assignedToName': self.assigned_to_name or '',
            'technicianId': self.technician_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'readyAt': self.ready_at.isoformat() if self.ready_at else None,
            'archivedAt': self.archived_at.isoformat() if self.archived_at else None,
        }

    def __repr__(self):
        return f'<Repair {self.ticket_number} {self.status}>'
