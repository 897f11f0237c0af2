from models import db
from models.base import BaseModel

class ProjectStatus(BaseModel):
    __tablename__ = 'project_statuses'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    status_name = db.Column(db.String(100), unique=True, nullable=False)
    status_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)
