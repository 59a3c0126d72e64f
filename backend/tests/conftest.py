import pytest

from timetable_validator.core.config import get_settings
from timetable_validator.schemas.policy import PeriodRange, ValidationPolicy
from timetable_validator.schemas.reference import Department, ReferenceData, Room, Subject, Teacher
from timetable_validator.schemas.timetable import ScheduleEntry


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear() #settings are cached per process, tests patch the environment
    yield
    get_settings.cache_clear()


@pytest.fixture()
def make_entry():
    def _make_entry(
        entry_id,
        *,
        room="R1",
        day="Monday",
        period=1,
        teacher="t1",
        subject="s1",
        semester="sem1",
        department="d1",
        code=None,
    ):
        return ScheduleEntry(
            id=entry_id,
            semesterId=semester,
            subjectId=subject,
            teacherId=teacher,
            departmentId=department,
            day=day,
            period=period,
            room=room,
            subjectCode=code or subject.upper(),
        )

    return _make_entry


@pytest.fixture()
def reference():
    return ReferenceData(
        departments=[
            Department(id="d1", name="Computer Science", shortName="CS"),
            Department(id="d2", name="Chemistry", shortName="CHEM"),
            Department(id="d3", name="Physics", shortName="PHY"),
        ],
        subjects=[
            Subject(id="s1", name="Algorithms", code="CS101", departmentId="d1", semesterId="sem1"),
            Subject(id="s2", name="Organic Chemistry", code="CH201", departmentId="d2", semesterId="sem1"),
            Subject(id="s3", name="Mechanics", code="PH101", departmentId="d3", semesterId="sem1"),
        ],
        rooms=[
            Room(id="r1", name="R1", type="lecture"),
            Room(id="r2", name="R2", type="lecture"),
            Room(id="lab1", name="Chem Lab", type="lab", primaryDepartmentId="d2", availableForOtherDepartments=False),
            Room(id="hall", name="Main Hall", type="lecture", primaryDepartmentId="d1", availableForOtherDepartments=True),
        ],
        teachers=[
            Teacher(id="t1", name="Prof A", departmentId="d1"),
            Teacher(id="t2", name="Prof B", departmentId="d2"),
        ],
    )


@pytest.fixture()
def chemistry_policy():
    return ValidationPolicy(department_periods={"d2": PeriodRange(start=3, end=6)})
