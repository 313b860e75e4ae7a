"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container
from src.class_attendance.class_attendance.users.model import CallerIdentity


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    admin = CallerIdentity(user_id=1, role="admin", name="Admin User")
    students = container.student_service.list_students()[:3]

    batch = container.attendance_service.mark_bulk(
        admin,
        [{"studentId": s.student_id, "status": "Present"} for s in students],
    )
    print(batch.to_dict())
    print(container.attendance_service.stats_overview())


if __name__ == "__main__":
    main()
