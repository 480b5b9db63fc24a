"""Account services backing the security panel."""

from __future__ import annotations

import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from accounts.models import User

logger = logging.getLogger("hrms")


def _ensure_employee_available(employee, *, except_user=None):
    linked = User.objects.filter(employee=employee)
    if except_user is not None:
        linked = linked.exclude(pk=except_user.pk)
    if linked.exists():
        raise ValueError("Cet employe est deja lie a un autre compte.")
    if not employee.is_active:
        raise ValueError("Impossible de lier un employe inactif.")


def _check_password(password, user=None):
    try:
        validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise ValueError(" ".join(exc.messages)) from exc


@transaction.atomic
def create_user_account(*, email, password, role=User.Role.EMPLOYEE, employee=None, created_by=None) -> User:
    """Create a portal account, optionally linked to an employee record."""
    email = (email or "").strip()
    if not email:
        raise ValueError("L'adresse e-mail est obligatoire.")
    if User.objects.filter(email__iexact=email).exists():
        raise ValueError("Un utilisateur avec cette adresse e-mail existe deja.")
    _check_password(password)

    first_name = last_name = ""
    if employee is not None:
        _ensure_employee_available(employee)
        first_name, last_name = employee.first_name, employee.last_name

    user = User.objects.create_user(
        email=email,
        password=password,
        role=role,
        employee=employee,
        first_name=first_name,
        last_name=last_name,
    )
    logger.info(
        "User account created: %s role=%s employee=%s by=%s",
        user.email,
        user.role,
        employee.employee_code if employee else None,
        created_by,
    )
    return user


@transaction.atomic
def link_employee(user: User, employee, *, actor=None) -> User:
    _ensure_employee_available(employee, except_user=user)
    user.employee = employee
    user.save(update_fields=["employee"])
    logger.info("User %s linked to employee %s by=%s", user.email, employee.employee_code, actor)
    return user


def unlink_employee(user: User, *, actor=None) -> User:
    if user.employee_id is None:
        raise ValueError("Ce compte n'est lie a aucun employe.")
    user.employee = None
    user.save(update_fields=["employee"])
    logger.info("User %s unlinked from employee by=%s", user.email, actor)
    return user


def set_role(user: User, role: str, *, actor=None) -> User:
    if role not in User.Role.values:
        raise ValueError("Role invalide.")
    if actor is not None and actor.pk == user.pk and role != User.Role.ADMIN:
        raise ValueError("Vous ne pouvez pas retirer votre propre role administrateur.")
    user.role = role
    user.save(update_fields=["role"])
    logger.info("User %s role set to %s by=%s", user.email, role, actor)
    return user


def toggle_active(user: User, *, actor=None) -> User:
    if actor is not None and actor.pk == user.pk:
        raise ValueError("Vous ne pouvez pas desactiver votre propre compte.")
    user.is_active = not user.is_active
    user.save(update_fields=["is_active"])
    logger.info("User %s active=%s by=%s", user.email, user.is_active, actor)
    return user


def reset_password(user: User, new_password: str, *, actor=None) -> User:
    """Admin-initiated password reset."""
    if not new_password:
        raise ValueError("Le nouveau mot de passe est obligatoire.")
    _check_password(new_password, user=user)
    user.set_password(new_password)
    user.save(update_fields=["password"])
    logger.info("Password reset for %s by=%s", user.email, actor)
    return user
