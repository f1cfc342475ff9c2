"""
Role-based decisions for the task lifecycle.

Everything here is a pure function of its arguments. Workers may only mark
their own tasks completed; admins may do anything, including moving a task
back to an earlier status.
"""
from typing import Optional, Union

from taskflow.core.errors import InvalidStatus
from taskflow.schemas.task import TaskStatus
from taskflow.schemas.user import UserRole

Role = Union[UserRole, str]


def parse_status(value) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        raise InvalidStatus() from None


def is_admin(role: Role) -> bool:
    return role == UserRole.admin


def can_create_task(role: Role) -> bool:
    return is_admin(role)


def can_register_user(role: Role) -> bool:
    return is_admin(role)


def can_report_error(role: Role) -> bool:
    return is_admin(role)


def can_view_all_tasks(role: Role) -> bool:
    return is_admin(role)


def can_transition(
    role: Role,
    current_status: Optional[TaskStatus],
    target_status,
    is_owner: bool,
) -> bool:
    """
    Raises InvalidStatus for an unknown target. current_status does not
    restrict the move.
    """
    target = parse_status(target_status)
    if is_admin(role):
        return True
    if role == UserRole.worker:
        return target is TaskStatus.completed and is_owner
    return False
