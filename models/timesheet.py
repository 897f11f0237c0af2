from models import db
from models.base import BaseModel
from datetime import datetime

DEFAULT_ACTIVITY_COLOR = '#6c757d'

APPROVAL_ACTIONS = ('approve', 'reject')


class TimesheetActivity(BaseModel):
    __tablename__ = 'timesheet_activities'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    activity_name = db.Column(db.String(100), unique=True, nullable=False)
    color = db.Column(db.String(7), default=DEFAULT_ACTIVITY_COLOR)
    is_active = db.Column(db.Boolean, default=True)


class TimesheetEntry(BaseModel):
    __tablename__ = 'timesheet_entries'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    mentor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    activity_id = db.Column(db.Integer, db.ForeignKey('timesheet_activities.id'), nullable=False)
    entry_date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    hours_worked = db.Column(db.Float, nullable=False)
    task_description = db.Column(db.Text, nullable=False)
    notes = db.Column(db.Text)
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    approved_by = db.Column(db.Integer, db.ForeignKey('users.id'))
    approved_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    project = db.relationship('Project', backref=db.backref('timesheet_entries', lazy=True, cascade="all, delete-orphan"))
    mentor = db.relationship('User', foreign_keys=[mentor_id])
    approver = db.relationship('User', foreign_keys=[approved_by])
    activity = db.relationship('TimesheetActivity')
    approvals = db.relationship(
        'TimesheetApproval',
        backref=db.backref('entry', lazy=True),
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<TimesheetEntry {self.id} {self.entry_date}>"


class TimesheetApproval(BaseModel):
    """One approve/reject decision on an entry."""
    __tablename__ = 'timesheet_approvals'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    entry_id = db.Column(db.Integer, db.ForeignKey('timesheet_entries.id'), nullable=False)
    approver_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    action = db.Column(db.String(10), nullable=False)
    comments = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.now)

    approver = db.relationship('User')
