from models import db
from models.base import BaseModel

class Subject(BaseModel):
    __tablename__ = 'subjects'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    subject_name = db.Column(db.String(100), unique=True, nullable=False)
    subject_code = db.Column(db.String(20))
    is_active = db.Column(db.Boolean, default=True)
