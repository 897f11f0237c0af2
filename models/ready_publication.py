from models import db
from models.base import BaseModel
from datetime import datetime

READY_STATUSES = ('pending', 'in_review', 'approved', 'published')

# statuses that place an entry in the "In Publication" view
IN_PUBLICATION_STATUSES = ('approved', 'published')


class ReadyForPublication(BaseModel):
    __tablename__ = 'ready_for_publication'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), unique=True, nullable=False)
    paper_title = db.Column(db.String(500), nullable=False)
    mentor_affiliation = db.Column(db.String(200))
    first_draft_link = db.Column(db.String(500))
    plagiarism_report_link = db.Column(db.String(500))
    ai_detection_link = db.Column(db.String(500))
    final_paper_link = db.Column(db.String(500))
    status = db.Column(db.String(20), nullable=False, default='pending')
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    project = db.relationship('Project', backref=db.backref('ready_publication', uselist=False, lazy=True, cascade="all, delete-orphan"))
    student_details = db.relationship(
        'ReadyForPublicationStudent',
        backref=db.backref('ready_publication', lazy=True),
        order_by='ReadyForPublicationStudent.author_order',
        cascade="all, delete-orphan"
    )
    conference_applications = db.relationship(
        'ConferenceApplication',
        backref=db.backref('ready_publication', lazy=True),
        cascade="all, delete-orphan"
    )
    journal_applications = db.relationship(
        'JournalApplication',
        backref=db.backref('ready_publication', lazy=True),
        cascade="all, delete-orphan"
    )
