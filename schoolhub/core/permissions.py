from __future__ import annotations

import enum


class Role(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Permission(str, enum.Enum):
    DASHBOARD_VIEW = "dashboard:view"
    ATTENDANCE_MANAGE = "attendance:manage"
    ATTENDANCE_VIEW = "attendance:view"
    EXAMS_MANAGE = "exams:manage"
    EXAMS_VIEW = "exams:view"
    FEES_MANAGE = "fees:manage"
    FEES_VIEW = "fees:view"
    USERS_INVITE = "users:invite"
    USERS_MANAGE = "users:manage"
    TENANTS_MANAGE = "tenants:manage"
    SETTINGS_BRANDING = "settings:branding"
    SETTINGS_TERMS = "settings:terms"


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.STUDENT: frozenset(
        {
            Permission.DASHBOARD_VIEW,
            Permission.ATTENDANCE_VIEW,
            Permission.EXAMS_VIEW,
            Permission.FEES_VIEW,
        }
    ),
    Role.TEACHER: frozenset(
        {
            Permission.DASHBOARD_VIEW,
            Permission.ATTENDANCE_MANAGE,
            Permission.ATTENDANCE_VIEW,
            Permission.EXAMS_MANAGE,
            Permission.FEES_VIEW,
        }
    ),
    Role.ADMIN: frozenset(
        {
            Permission.DASHBOARD_VIEW,
            Permission.ATTENDANCE_MANAGE,
            Permission.ATTENDANCE_VIEW,
            Permission.EXAMS_MANAGE,
            Permission.FEES_MANAGE,
            Permission.USERS_INVITE,
            Permission.USERS_MANAGE,
            Permission.SETTINGS_BRANDING,
            Permission.SETTINGS_TERMS,
        }
    ),
    Role.SUPERADMIN: frozenset(Permission),
}


def has_permission(role: Role, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, frozenset())
