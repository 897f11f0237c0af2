import pytest

from models import Student
from services.filters import FilterError, apply_filters, apply_sort, eq, search
from tests.helpers import add_student


def test_blank_arguments_are_ignored(app):
    add_student('Asha Iyer')
    add_student('Kiran Patel')
    query = apply_filters(Student.query, {'search': '  ', 'application_year': ''},
                          {'search': search(Student.full_name),
                           'application_year': eq(Student.application_year)})
    assert query.count() == 2


def test_search_matches_any_column_case_insensitively(app):
    add_student('Asha Iyer', email_address='asha@example.com')
    add_student('Kiran Patel', email_address='kp@example.com')
    builders = {'search': search(Student.full_name, Student.email_address)}

    names = [s.full_name for s in apply_filters(Student.query, {'search': 'ASHA'}, builders)]
    assert names == ['Asha Iyer']
    names = [s.full_name for s in apply_filters(Student.query, {'search': 'kp@'}, builders)]
    assert names == ['Kiran Patel']


def test_equality_filters_combine(app):
    add_student('Asha Iyer', application_year=2024, grade='11')
    add_student('Kiran Patel', application_year=2025, grade='11')
    builders = {'year': eq(Student.application_year), 'grade': eq(Student.grade, cast=str)}

    rows = apply_filters(Student.query, {'year': '2025', 'grade': '11'}, builders).all()
    assert [s.full_name for s in rows] == ['Kiran Patel']


def test_bad_integer_raises_filter_error(app):
    with pytest.raises(FilterError) as excinfo:
        apply_filters(Student.query, {'year': 'abc'}, {'year': eq(Student.application_year)})
    assert excinfo.value.name == 'year'


def test_sort_falls_back_to_default(app):
    add_student('Zoe')
    add_student('Amit')
    orderings = {'name': Student.full_name.asc(), 'newest': Student.id.desc()}

    rows = apply_sort(Student.query, 'unknown', orderings, 'name').all()
    assert [s.full_name for s in rows] == ['Amit', 'Zoe']
    rows = apply_sort(Student.query, 'newest', orderings, 'name').all()
    assert [s.full_name for s in rows] == ['Amit', 'Zoe']
