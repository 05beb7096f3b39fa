"""Database seeding service for sample data."""
from campus_attendance import db
from campus_attendance.models.course import Course
from campus_attendance.models.department import Batch, Department, Section
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.models.student import Student
from campus_attendance.models.timetable import TimetableSlot, WeekDay
from campus_attendance.models.user import User, UserRole

class SeedService:
    """Service to seed database with sample data."""

    @staticmethod
    def seed_all():
        """Seed all sample data."""
        department = SeedService.seed_department()
        section = SeedService.seed_batch_and_section(department)
        SeedService.seed_courses(department)
        faculty = SeedService.seed_faculty(department)
        SeedService.seed_students(section)
        SeedService.seed_timetable(section, faculty)
        db.session.commit()

    @staticmethod
    def seed_department() -> Department:
        department = Department.query.filter_by(dept_code='CSE').first()
        if not department:
            department = Department(dept_name='Computer Science and Engineering', dept_code='CSE')
            db.session.add(department)
            db.session.flush()
        return department

    @staticmethod
    def seed_batch_and_section(department: Department) -> Section:
        batch = Batch.query.filter_by(dept_id=department.id, batch_name='2022-26').first()
        if not batch:
            batch = Batch(dept_id=department.id, start_year=2022, end_year=2026, batch_name='2022-26')
            db.session.add(batch)
            db.session.flush()

        section = Section.query.filter_by(batch_id=batch.id, section_name='A').first()
        if not section:
            section = Section(batch_id=batch.id, section_name='A')
            db.session.add(section)
            db.session.flush()
        return section

    @staticmethod
    def seed_courses(department: Department):
        courses = [
            ('CS101', 'Programming Fundamentals', 4),
            ('CS201', 'Data Structures', 4),
            ('CS202', 'Discrete Mathematics', 3),
            ('CS203', 'Digital Logic', 3),
        ]
        for code, name, credits in courses:
            if not Course.query.filter_by(course_code=code).first():
                db.session.add(Course(course_code=code, course_name=name,
                                      credits=credits, dept_id=department.id))
        db.session.flush()
        print(f"✅ {Course.query.count()} courses")

    @staticmethod
    def seed_faculty(department: Department) -> dict:
        faculty_data = [
            ('Dr. Anita Rao', 'anita.rao@college.edu', 'CS101'),
            ('Dr. Vikram Nair', 'vikram.nair@college.edu', 'CS201'),
            ('Prof. Meera Iyer', 'meera.iyer@college.edu', 'CS202'),
            ('Prof. Rahul Menon', 'rahul.menon@college.edu', 'CS203'),
        ]

        faculty = {}
        for name, email, course_code in faculty_data:
            profile = FacultyProfile.query.filter_by(email=email).first()
            if not profile:
                user = User(email=email, role=UserRole.FACULTY)
                user.set_password('faculty123')
                db.session.add(user)
                db.session.flush()

                profile = FacultyProfile(
                    faculty_name=name,
                    email=email,
                    dept_id=department.id,
                    authorization_key=FacultyProfile.generate_authorization_key(),
                    user_id=user.id
                )
                db.session.add(profile)
                db.session.flush()
            faculty[course_code] = profile

        print(f"✅ {FacultyProfile.query.count()} faculty profiles")
        return faculty

    @staticmethod
    def seed_students(section: Section):
        for number in range(1, 31):
            roll = f"22CSE{number:03d}"
            if not Student.query.filter_by(roll_number=roll).first():
                db.session.add(Student(
                    roll_number=roll,
                    full_name=f"Student {number:02d}",
                    email=f"{roll.lower()}@college.edu",
                    section_id=section.id
                ))
        db.session.flush()

        # First student acts as class representative
        first = Student.query.filter_by(roll_number='22CSE001').first()
        if not User.query.filter_by(student_id=first.id, role=UserRole.CR).first():
            cr = User(email=first.email, role=UserRole.CR, student_id=first.id, semester=3)
            cr.set_password('cr123456')
            db.session.add(cr)

        print(f"✅ {Student.query.count()} students")

    @staticmethod
    def seed_timetable(section: Section, faculty: dict):
        rotation = ['CS101', 'CS201', 'CS202', 'CS203']
        weekdays = [WeekDay.MONDAY, WeekDay.TUESDAY, WeekDay.WEDNESDAY,
                    WeekDay.THURSDAY, WeekDay.FRIDAY]

        for day_index, day in enumerate(weekdays):
            for slot_number in range(1, 5):
                exists = TimetableSlot.query.filter_by(
                    section_id=section.id, semester=3, day=day, slot_number=slot_number
                ).first()
                if exists:
                    continue
                course_code = rotation[(day_index + slot_number) % len(rotation)]
                db.session.add(TimetableSlot(
                    section_id=section.id,
                    semester=3,
                    day=day,
                    slot_number=slot_number,
                    course_code=course_code,
                    faculty_profile_id=faculty[course_code].id,
                    room_info=f"Room {100 + slot_number}"
                ))
        db.session.flush()
        print(f"✅ {TimetableSlot.query.count()} timetable slots")
