from schoolhub.core.repositories.attendance import AttendanceMark, AttendanceRepository, AttendanceSummary
from schoolhub.core.repositories.base import TenantTableRepository
from schoolhub.core.repositories.branding import BrandingRepository
from schoolhub.core.repositories.school import SchoolRepository
from schoolhub.core.repositories.students import StudentRepository
from schoolhub.core.repositories.terms import AcademicTermRepository, ClassRepository

__all__ = [
    "AcademicTermRepository",
    "AttendanceMark",
    "AttendanceRepository",
    "AttendanceSummary",
    "BrandingRepository",
    "ClassRepository",
    "SchoolRepository",
    "StudentRepository",
    "TenantTableRepository",
]
