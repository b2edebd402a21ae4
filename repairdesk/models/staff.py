from .. import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime


class StaffMixin(UserMixin):
    """Shared password handling for admins and technicians"""

    # Flask-Login ids are prefixed so one loader can serve both tables
    id_prefix = None
    role = None

    def get_id(self):
        return f'{self.id_prefix}:{self.id}'

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash or password is None:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'Admin'


class Admin(StaffMixin, db.Model):
    __tablename__ = 'admins'

    id_prefix = 'admin'
    role = 'Admin'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256))
    force_password_change = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def display_name(self):
        return self.email

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'forcePasswordChange': bool(self.force_password_change),
        }

    def __repr__(self):
        return f'<Admin {self.email}>'


class Technician(StaffMixin, db.Model):
    __tablename__ = 'technicians'

    id_prefix = 'technician'
    role = 'Student'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    phone = db.Column(db.String(30), default='')
    password_hash = db.Column(db.String(256))
    force_password_change = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    repairs = db.relationship('Repair', backref='technician', lazy=True,
                              foreign_keys='Repair.technician_id')

    @property
    def display_name(self):
        return self.name

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone or '',
            'forcePasswordChange': bool(self.force_password_change),
        }

    def __repr__(self):
        return f'<Technician {self.name} ({self.email})>'
