from models import db
from models.base import BaseModel
from datetime import datetime

VENUE_TYPES = ('Conference', 'Journal')

CONFERENCE_FIELDS = (
    'conference_acceptance_date',
    'conference_reviewer_comments',
    'conference_presentation_date',
    'conference_camera_ready_submission_date',
    'conference_copyright_submission_date',
    'conference_doi_link',
    'conference_publisher',
)

JOURNAL_FIELDS = (
    'journal_acceptance_date',
    'journal_reviewer_comments',
    'journal_link',
    'journal_publishing_date',
    'journal_doi_link',
    'journal_publisher',
)


class Publication(BaseModel):
    __tablename__ = 'publications'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    publication_id = db.Column(db.String(12), unique=True, nullable=False) # PUBYYYYNNNN
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    paper_title = db.Column(db.String(500), nullable=False)
    venue_type = db.Column(db.String(10), nullable=False)

    conference_acceptance_date = db.Column(db.Date)
    conference_reviewer_comments = db.Column(db.Text)
    conference_presentation_date = db.Column(db.Date)
    conference_camera_ready_submission_date = db.Column(db.Date)
    conference_copyright_submission_date = db.Column(db.Date)
    conference_doi_link = db.Column(db.String(500))
    conference_publisher = db.Column(db.String(200))

    journal_acceptance_date = db.Column(db.Date)
    journal_reviewer_comments = db.Column(db.Text)
    journal_link = db.Column(db.String(500))
    journal_publishing_date = db.Column(db.Date)
    journal_doi_link = db.Column(db.String(500))
    journal_publisher = db.Column(db.String(200))

    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    project = db.relationship('Project', backref=db.backref('publications', lazy=True, cascade="all, delete-orphan"))
    student_links = db.relationship(
        'PublicationStudent',
        backref=db.backref('publication', lazy=True),
        cascade="all, delete-orphan"
    )
    mentor_links = db.relationship(
        'PublicationMentor',
        backref=db.backref('publication', lazy=True),
        cascade="all, delete-orphan"
    )
