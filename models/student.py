from models import db
from models.base import BaseModel
from datetime import datetime

class Student(BaseModel):
    __tablename__ = 'students'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    student_id = db.Column(db.String(12), unique=True, nullable=False) # STUYYYYNNNN
    full_name = db.Column(db.String(100), nullable=False)
    affiliation = db.Column(db.String(200))
    grade = db.Column(db.String(20))
    counselor_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    rbm_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    board_id = db.Column(db.Integer, db.ForeignKey('boards.id'))
    contact_no = db.Column(db.String(20))
    email_address = db.Column(db.String(100))
    application_year = db.Column(db.Integer)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    rbm = db.relationship('User', foreign_keys=[rbm_id])
    counselor = db.relationship('User', foreign_keys=[counselor_id])
    board = db.relationship('Board')

    def __repr__(self):
        return f"<Student {self.student_id}>"
