from models import db
from models.base import BaseModel
from datetime import datetime

class Conference(BaseModel):
    __tablename__ = 'conferences'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    conference_name = db.Column(db.String(255), nullable=False)
    conference_shortform = db.Column(db.String(50))
    conference_link = db.Column(db.String(500))
    affiliation = db.Column(db.String(100))
    conference_type = db.Column(db.String(50))
    conference_date = db.Column(db.Date)
    submission_due_date = db.Column(db.Date)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)
