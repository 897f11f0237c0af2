from models import db
from models.base import BaseModel
from datetime import datetime

class Project(BaseModel):
    __tablename__ = 'projects'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    project_id = db.Column(db.String(12), unique=True, nullable=False) # PRJYYYYNNNN
    project_name = db.Column(db.String(255), nullable=False)
    status_id = db.Column(db.Integer, db.ForeignKey('project_statuses.id'))
    subject_id = db.Column(db.Integer, db.ForeignKey('subjects.id'))
    lead_mentor_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    rbm_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    has_prototype = db.Column(db.String(3), default='No')
    start_date = db.Column(db.Date)
    assigned_date = db.Column(db.Date)
    completion_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    drive_link = db.Column(db.String(500))
    description = db.Column(db.Text)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    status = db.relationship('ProjectStatus')
    subject = db.relationship('Subject')
    lead_mentor = db.relationship('User', foreign_keys=[lead_mentor_id])
    rbm = db.relationship('User', foreign_keys=[rbm_id])

    # Assignment rows go with the project
    student_links = db.relationship(
        'ProjectStudent',
        backref=db.backref('project', lazy=True),
        cascade="all, delete-orphan"
    )
    mentor_links = db.relationship(
        'ProjectMentor',
        backref=db.backref('project', lazy=True),
        cascade="all, delete-orphan"
    )
    tag_links = db.relationship(
        'ProjectTagAssignment',
        backref=db.backref('project', lazy=True),
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Project {self.project_id}>"
