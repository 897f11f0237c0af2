from models import db
from models.base import BaseModel

class PublicationStudent(BaseModel):
    __tablename__ = 'publication_students'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    publication_id = db.Column(db.Integer, db.ForeignKey('publications.id'), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    student = db.relationship('Student')


class PublicationMentor(BaseModel):
    __tablename__ = 'publication_mentors'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    publication_id = db.Column(db.Integer, db.ForeignKey('publications.id'), nullable=False)
    mentor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    is_lead_mentor = db.Column(db.Boolean, default=False)
    mentor = db.relationship('User')
