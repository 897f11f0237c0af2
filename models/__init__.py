from flask_sqlalchemy import SQLAlchemy
db = SQLAlchemy()

from .user import User
from .audit_trail import AuditTrail
from .project_status import ProjectStatus
from .subject import Subject
from .tag import Tag
from .board import Board
from .student import Student
from .project import Project
from .project_assignments import ProjectStudent, ProjectMentor, ProjectTagAssignment
from .publication import Publication
from .publication_authors import PublicationStudent, PublicationMentor
from .ready_publication import ReadyForPublication
from .ready_publication_student import ReadyForPublicationStudent
from .conference import Conference
from .journal import Journal
from .application import ConferenceApplication, JournalApplication
from .timesheet import TimesheetActivity, TimesheetEntry, TimesheetApproval
