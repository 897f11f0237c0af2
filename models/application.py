from models import db
from models.base import BaseModel
from datetime import datetime

APPLICATION_STATUSES = ('applied', 'under_review', 'accepted', 'rejected', 'withdrawn')


class ConferenceApplication(BaseModel):
    __tablename__ = 'publication_conference_applications'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    ready_publication_id = db.Column(db.Integer, db.ForeignKey('ready_for_publication.id'), nullable=False)
    conference_id = db.Column(db.Integer, db.ForeignKey('conferences.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='applied')
    application_date = db.Column(db.Date, nullable=False)
    submission_deadline = db.Column(db.Date)
    submission_link = db.Column(db.String(500))
    notes = db.Column(db.Text)
    feedback = db.Column(db.Text)
    response_date = db.Column(db.Date)
    # filled in once accepted
    acceptance_date = db.Column(db.Date)
    reviewer_changes = db.Column(db.Text)
    formatted_paper_link = db.Column(db.String(500))
    presentation_link = db.Column(db.String(500))
    attended = db.Column(db.Boolean)
    certificate_received = db.Column(db.Boolean)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    conference = db.relationship('Conference')


class JournalApplication(BaseModel):
    __tablename__ = 'publication_journal_applications'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    ready_publication_id = db.Column(db.Integer, db.ForeignKey('ready_for_publication.id'), nullable=False)
    journal_id = db.Column(db.Integer, db.ForeignKey('journals.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='applied')
    application_date = db.Column(db.Date, nullable=False)
    submission_deadline = db.Column(db.Date)
    submission_link = db.Column(db.String(500))
    manuscript_id = db.Column(db.String(100))
    notes = db.Column(db.Text)
    feedback = db.Column(db.Text)
    response_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    journal = db.relationship('Journal')
