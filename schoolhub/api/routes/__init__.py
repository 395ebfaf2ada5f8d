from schoolhub.api.routes.admin import router as admin_router
from schoolhub.api.routes.attendance import router as attendance_router
from schoolhub.api.routes.configuration import router as configuration_router
from schoolhub.api.routes.school import router as school_router
from schoolhub.api.routes.students import router as students_router
from schoolhub.api.routes.users import router as users_router

__all__ = [
    "admin_router",
    "attendance_router",
    "configuration_router",
    "school_router",
    "students_router",
    "users_router",
]
