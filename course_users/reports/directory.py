"""Course directory for the report selector."""

from course_users.store.base import LearningStore

from .schemas import CourseOption


class CourseDirectory:
    """Published courses offered for reporting."""

    def __init__(self, store: LearningStore):
        self.store = store

    def list_courses(self) -> list[CourseOption]:
        """Published course-type entries sorted by title, ids unique.

        Titles compare case-insensitively with the id as tie-breaker so the
        order is stable across requests.
        """
        seen: set[int] = set()
        options: list[CourseOption] = []
        for course in self.store.list_courses():
            if not course.is_listable or course.id in seen:
                continue
            seen.add(course.id)
            options.append(CourseOption(id=course.id, title=course.title))

        options.sort(key=lambda option: (option.title.casefold(), option.id))
        return options

    def get_title(self, course_id: int) -> str:
        """Title for the report heading; empty when the course is unknown."""
        course = self.store.get_course(course_id)
        return course.title if course else ""
