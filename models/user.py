from models import db
from models.base import BaseModel
from sqlalchemy import text
from datetime import datetime

USER_TYPES = ('admin', 'mentor', 'councillor', 'rbm')


class User(BaseModel):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    user_type = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(100))
    contact_no = db.Column(db.String(20))
    specialization = db.Column(db.String(100))
    branch = db.Column(db.String(100))
    organization_name = db.Column(db.String(150))
    status = db.Column(db.String(10), server_default=text("'active'"), default='active')
    created_at = db.Column(db.DateTime, default=datetime.now)

    def __repr__(self):
        return f"<User {self.username}>"
