from models import db
from models.base import BaseModel
from datetime import datetime

class Journal(BaseModel):
    __tablename__ = 'journals'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    journal_name = db.Column(db.String(255), nullable=False)
    publisher = db.Column(db.String(100))
    journal_link = db.Column(db.String(500))
    acceptance_frequency = db.Column(db.String(50))
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)
