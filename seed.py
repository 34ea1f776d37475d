"""Default collections used when nothing usable is stored yet."""

import datetime

from schemas import Student, StudentStatus, Subject

DEFAULT_STUDENTS = [
    Student(
        id="stu1",
        student_id="STU-2024-001",
        first_name="John",
        last_name="Doe",
        email="john.doe@university.edu",
        phone="+1 (555) 123-4567",
        enrollment_date=datetime.date(2024, 9, 1),
        major="Computer Science",
        status=StudentStatus.ACTIVE,
    ),
    Student(
        id="stu2",
        student_id="STU-2024-002",
        first_name="Jane",
        last_name="Smith",
        email="jane.smith@university.edu",
        phone="+1 (555) 987-6543",
        enrollment_date=datetime.date(2024, 8, 15),
        major="Electrical Engineering",
        status=StudentStatus.ACTIVE,
    ),
    Student(
        id="stu3",
        student_id="STU-2024-003",
        first_name="Michael",
        last_name="Johnson",
        email="michael.j@university.edu",
        phone="+1 (555) 456-7890",
        enrollment_date=datetime.date(2024, 9, 1),
        major="Business Administration",
        status=StudentStatus.ACTIVE,
    ),
    Student(
        id="stu4",
        student_id="STU-2023-045",
        first_name="Sarah",
        last_name="Williams",
        email="sarah.w@university.edu",
        phone="+1 (555) 234-5678",
        enrollment_date=datetime.date(2023, 8, 20),
        major="Mechanical Engineering",
        status=StudentStatus.GRADUATED,
    ),
    Student(
        id="stu5",
        student_id="STU-2024-078",
        first_name="David",
        last_name="Brown",
        email="david.brown@university.edu",
        phone="+1 (555) 345-6789",
        enrollment_date=datetime.date(2024, 1, 15),
        major="Computer Science",
        status=StudentStatus.ACTIVE,
    ),
]

DEFAULT_SUBJECTS = [
    Subject(id="sub1", code="IT 101", name="Intro to Programming", credits=3),
    Subject(id="sub2", code="MATH 203", name="Calculus I", credits=4),
    Subject(id="sub3", code="ENG 101", name="Technical Writing", credits=3),
    Subject(id="sub4", code="SCI 105", name="General Science", credits=3),
    Subject(id="sub5", code="HIST 201", name="World History", credits=3),
]

DEFAULT_GRADES = []
