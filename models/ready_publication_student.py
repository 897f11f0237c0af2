from models import db
from models.base import BaseModel

class ReadyForPublicationStudent(BaseModel):
    __tablename__ = 'ready_for_publication_students'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    ready_publication_id = db.Column(db.Integer, db.ForeignKey('ready_for_publication.id'), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    student_affiliation = db.Column(db.String(200))
    student_address = db.Column(db.String(500))
    author_order = db.Column(db.Integer, default=1)
    student = db.relationship('Student')
