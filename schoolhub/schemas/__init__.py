from schoolhub.schemas.attendance import (
    AttendanceBatchRequest,
    AttendanceBatchResponse,
    AttendanceMarkRequest,
    AttendanceRecordResponse,
    AttendanceSummaryResponse,
    ClassAttendanceReportResponse,
)
from schoolhub.schemas.branding import BrandingResponse, BrandingUpdateRequest
from schoolhub.schemas.configuration import (
    AcademicTermRequest,
    AcademicTermResponse,
    ClassRequest,
    ClassResponse,
)
from schoolhub.schemas.school import SchoolResponse, SchoolUpsertRequest
from schoolhub.schemas.student import StudentCreateRequest, StudentResponse, StudentUpdateRequest
from schoolhub.schemas.tenant import (
    AdminOverviewResponse,
    TenantCreateRequest,
    TenantRenameRequest,
    TenantResponse,
)
from schoolhub.schemas.user import TenantUserResponse, UserRoleUpdateRequest

__all__ = [
    "AcademicTermRequest",
    "AcademicTermResponse",
    "AdminOverviewResponse",
    "AttendanceBatchRequest",
    "AttendanceBatchResponse",
    "AttendanceMarkRequest",
    "AttendanceRecordResponse",
    "AttendanceSummaryResponse",
    "BrandingResponse",
    "BrandingUpdateRequest",
    "ClassAttendanceReportResponse",
    "ClassRequest",
    "ClassResponse",
    "SchoolResponse",
    "SchoolUpsertRequest",
    "StudentCreateRequest",
    "StudentResponse",
    "StudentUpdateRequest",
    "TenantCreateRequest",
    "TenantRenameRequest",
    "TenantResponse",
    "TenantUserResponse",
    "UserRoleUpdateRequest",
]
