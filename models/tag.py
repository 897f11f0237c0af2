from models import db
from models.base import BaseModel

DEFAULT_TAG_COLOR = '#007bff'

class Tag(BaseModel):
    __tablename__ = 'project_tags'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    tag_name = db.Column(db.String(50), unique=True, nullable=False)
    tag_color = db.Column(db.String(7), default=DEFAULT_TAG_COLOR)
    is_active = db.Column(db.Boolean, default=True)
