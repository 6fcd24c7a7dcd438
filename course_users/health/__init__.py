from course_users.health.router import router


__all__ = ["router"]
