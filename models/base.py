from datetime import date, datetime, time
from models import db


class BaseModel(db.Model):
    """Base model to inherit common properties."""
    __abstract__ = True

    @classmethod
    def find(cls, record_id):
        """Retrieve a record by primary key."""
        return db.session.get(cls, record_id)

    @classmethod
    def query_by(cls, **kwargs):
        """Retrieve records based on filter criteria."""
        return cls.query.filter_by(**kwargs).all()

    @classmethod
    def query_first(cls, **kwargs):
        """Retrieve the first matching record."""
        return cls.query.filter_by(**kwargs).first()

    def to_dict(self, exclude=()):
        """Convert the row's columns to a JSON-friendly dictionary."""
        record_data = {}
        for column in self.__table__.columns:
            if column.name in exclude:
                continue
            value = getattr(self, column.name)
            if isinstance(value, (date, datetime, time)):
                value = value.isoformat()
            record_data[column.name] = value
        return record_data
